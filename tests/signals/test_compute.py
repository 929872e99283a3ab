"""Tests for signal computation."""

from __future__ import annotations

from archmap.models import CONTEXT, HINT, NAV, RISK, ParsedFile, Signal
from archmap.signals.compute import (
    BIG,
    CYCLE,
    DEEP_PATH,
    DYNAMIC_IMPORT,
    ENTRYPOINT,
    GOD_MODULE,
    ORPHAN,
    PARSE_ERROR,
    PUBLIC_API,
    compute_signals,
)
from archmap.signals.policies import SignalConfig, Thresholds
from tests._fixtures.graphs import make_graph


def _sample_graph():
    return make_graph(
        {
            "src/index.ts": ["src/app/service.ts"],
            "src/app/service.ts": ["src/lib/util.ts", "ext:lodash"],
            "tests/util.test.ts": ["src/lib/util.ts"],
            "scripts/seed.ts": ["src/lib/util.ts"],
        },
        extra_files=["README.md"],
    )


def test_entrypoints_are_ranked_by_pattern_priority_then_path() -> None:
    result = compute_signals(_sample_graph())

    assert [(item.file, item.score) for item in result.entrypoints] == [
        ("src/index.ts", 5),
        ("scripts/seed.ts", 1),
    ]
    assert result.entrypoints[0].reason == "no importers, imports 1; matches src/**"
    assert result.entrypoints[1].reason == "no importers, imports 1; matches **"


def test_test_files_and_isolated_files_are_not_entrypoints() -> None:
    result = compute_signals(_sample_graph())
    files = {item.file for item in result.entrypoints}

    assert "tests/util.test.ts" not in files
    assert "README.md" not in files


def test_public_api_uses_boundary_rules() -> None:
    result = compute_signals(_sample_graph())

    assert [item.file for item in result.public_api] == ["src/index.ts"]
    assert result.public_api[0].reason == "boundary public-surface; fan-in 0"
    assert result.contract_signals == {}


def test_hub_rankings() -> None:
    result = compute_signals(_sample_graph())

    assert [(item.file, item.score) for item in result.hubs_fan_in] == [
        ("src/lib/util.ts", 3),
        ("src/app/service.ts", 1),
    ]
    assert result.hubs_fan_in[0].reason == "fan-in 3"
    assert [item.file for item in result.hubs_fan_out] == [
        "scripts/seed.ts",
        "src/app/service.ts",
        "src/index.ts",
        "tests/util.test.ts",
    ]


def test_inline_signals_are_ordered_by_kind() -> None:
    result = compute_signals(_sample_graph())

    assert result.for_file("src/index.ts").inline == (
        Signal(CONTEXT, ORPHAN),
        Signal(NAV, ENTRYPOINT),
        Signal(NAV, PUBLIC_API),
    )
    assert result.for_file("README.md").codes() == (ORPHAN,)
    assert result.for_file("src/lib/util.ts").codes() == ()


def test_unknown_file_has_no_signals() -> None:
    result = compute_signals(_sample_graph())

    entry = result.for_file("src/missing.ts")
    assert entry.file == "src/missing.ts"
    assert entry.codes() == ()
    assert not entry.has_risk()


def test_cycle_members_carry_risk_first() -> None:
    graph = make_graph({"a.ts": ["b.ts"], "b.ts": ["a.ts"], "c.ts": ["a.ts"]})

    result = compute_signals(graph)

    assert result.for_file("a.ts").inline[0] == Signal(RISK, CYCLE)
    assert result.for_file("b.ts").has_risk()
    assert not result.for_file("c.ts").has_risk()
    assert result.risky_files() == {"a.ts", "b.ts"}


def test_threshold_hints() -> None:
    graph = make_graph(
        {
            "a/b/c/d/deep.py": ["core.py"],
            "x.py": ["core.py"],
            "y.py": ["core.py"],
        }
    )
    config = SignalConfig(thresholds=Thresholds(god_module_fan_in=2, deep_path=3, big_loc=100))
    parsed = {"core.py": ParsedFile(file="core.py", line_count=100)}

    result = compute_signals(graph, config, parse_results=parsed)

    assert result.for_file("core.py").codes() == (GOD_MODULE, BIG)
    assert DEEP_PATH in result.for_file("a/b/c/d/deep.py").codes()
    assert DEEP_PATH not in result.for_file("x.py").codes()


def test_parse_results_add_hints_and_warnings() -> None:
    graph = make_graph({"a.py": ["b.py"]})
    parsed = {
        "a.py": ParsedFile(file="a.py", dynamic=True),
        "b.py": ParsedFile(file="b.py", warnings=("PARSE-ERROR: syntax errors in file",)),
    }

    result = compute_signals(graph, parse_results=parsed)

    assert Signal(HINT, DYNAMIC_IMPORT) in result.for_file("a.py").inline
    assert Signal(HINT, PARSE_ERROR) in result.for_file("b.py").inline
    assert result.warnings == ["b.py: PARSE-ERROR: syntax errors in file"]


def test_custom_entrypoint_patterns() -> None:
    graph = make_graph({"apps/web/main.ts": ["lib/x.ts"], "tools/gen.ts": ["lib/x.ts"]})
    config = SignalConfig(entrypoint_patterns=("apps/**",))

    result = compute_signals(graph, config)

    assert [item.file for item in result.entrypoints] == ["apps/web/main.ts"]


def test_results_are_deterministic() -> None:
    first = compute_signals(_sample_graph())
    second = compute_signals(_sample_graph())

    assert first == second

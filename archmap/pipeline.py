"""End-to-end map generation: scan, parse, resolve, analyze and render."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from .budgets import DEFAULT_PROFILE, signal_budgets_with
from .config import ArchmapConfig, ConfigError, load_config
from .graph import build_dependency_graph
from .logging import RunLogger, run_logger
from .models import ParsedFile, RepoManifest
from .parsers.tree_sitter import ImportParser
from .render.collapse import normalize_focus
from .render.report import RenderInput, RenderOptions, render_report
from .repo_scanner import RepoScanner
from .resolver import ImportResolver
from .signals.compute import compute_signals
from .signals.policies import signal_config_from
from .tree import build_tree

DEFAULT_OUTPUT = "ARCHITECTURE.md"


@dataclass(frozen=True)
class MapOptions:
    """Caller options for one map run; ``None`` falls back to .archmap.yml or defaults."""

    out: Optional[str] = None
    config_path: Optional[str] = None
    focus: Optional[str] = None
    focus_file: Optional[str] = None
    depth: Optional[int] = None
    budget_profile: Optional[str] = None
    full_signals: bool = False
    show_orphans: bool = False


@dataclass
class PipelineResult:
    root: Path
    output_path: Path
    content: str
    warnings: List[str] = field(default_factory=list)
    file_count: int = 0


ScannerFactory = Callable[[Iterable[str], Iterable[str]], RepoScanner]


def _default_scanner(exclude_paths: Iterable[str], skip_files: Iterable[str]) -> RepoScanner:
    return RepoScanner(exclude_paths=exclude_paths, skip_files=skip_files)


class MapPipeline:
    """Coordinates a single architecture-map run over one repository."""

    def __init__(self, scanner_factory: ScannerFactory = _default_scanner) -> None:
        self._scanner_factory = scanner_factory

    def run(self, path: str, options: MapOptions = MapOptions()) -> PipelineResult:
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Repository path not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {path}")
        config_source = Path(options.config_path) if options.config_path else root
        log = run_logger("pipeline", root.name)
        config = load_config(config_source)

        output_path = self._output_path(root, options, config)
        output_rel = _relative_to(output_path, root)
        skip = [output_rel] if output_rel else []
        scanner = self._scanner_factory(config.exclude_paths, skip)
        manifest = scanner.scan(str(root))
        files = manifest.paths()
        log.info("Scanned %d files under %s", len(files), root)

        if options.focus_file and normalize_focus(options.focus_file) not in set(files):
            raise ConfigError(f"--focus-file not found: {options.focus_file}")

        parsed = self._parse_files(manifest, log)
        resolver = ImportResolver(files)
        graph = build_dependency_graph(
            files, {file_id: result.specifiers for file_id, result in parsed.items()}, resolver
        )
        signals = compute_signals(
            graph,
            signal_config_from(config),
            signal_budgets_with(config.signals.budgets),
            parsed,
        )
        log.info(
            "Graph: %d internal edges, %d cycles, %d entrypoints",
            graph.edge_count(),
            len(graph.cycles),
            len(signals.entrypoints),
        )

        render_options = RenderOptions(
            depth=options.depth,
            focus=options.focus,
            focus_file=options.focus_file,
            budget_profile=options.budget_profile or config.budget_profile or DEFAULT_PROFILE,
            full_signals=options.full_signals,
            show_orphans=options.show_orphans,
            project_name=root.name,
        )
        output = render_report(RenderInput(build_tree(files), signals, graph), render_options)
        for warning in output.warnings:
            log.debug("Warning: %s", warning)

        return PipelineResult(
            root=root,
            output_path=output_path,
            content=output.content,
            warnings=list(output.warnings),
            file_count=len(files),
        )

    def write(self, result: PipelineResult) -> Path:
        result.output_path.parent.mkdir(parents=True, exist_ok=True)
        result.output_path.write_text(result.content, encoding="utf-8")
        run_logger("pipeline", result.root.name).info("Wrote %s", result.output_path)
        return result.output_path

    @staticmethod
    def _output_path(root: Path, options: MapOptions, config: ArchmapConfig) -> Path:
        target = Path(options.out or config.output or DEFAULT_OUTPUT).expanduser()
        return target if target.is_absolute() else root / target

    @staticmethod
    def _parse_files(manifest: RepoManifest, log: RunLogger) -> Dict[str, ParsedFile]:
        parser = ImportParser()
        root = Path(manifest.root)
        parsed: Dict[str, ParsedFile] = {}
        for meta in manifest.files:
            if not parser.supports(meta.path):
                continue
            try:
                source = (root / meta.path).read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                log.warning("Could not read %s: %s", meta.path, exc)
                parsed[meta.path] = ParsedFile(
                    file=meta.path, warnings=(f"PARSE-ERROR: unreadable file ({exc.strerror})",)
                )
                continue
            parsed[meta.path] = parser.parse(meta.path, source)
        return parsed


def _relative_to(path: Path, root: Path) -> Optional[str]:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return None


__all__ = ["DEFAULT_OUTPUT", "MapOptions", "MapPipeline", "PipelineResult"]

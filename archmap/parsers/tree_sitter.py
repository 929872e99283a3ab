"""Tree-sitter powered import extraction for Python, JavaScript and TypeScript."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from ..models import ParsedFile

PYTHON = "python"
JAVASCRIPT = "javascript"
TYPESCRIPT = "typescript"
TSX = "tsx"

_LANGUAGE_BY_SUFFIX: Dict[str, str] = {
    ".py": PYTHON,
    ".pyi": PYTHON,
    ".js": JAVASCRIPT,
    ".jsx": JAVASCRIPT,
    ".mjs": JAVASCRIPT,
    ".cjs": JAVASCRIPT,
    ".ts": TYPESCRIPT,
    ".mts": TYPESCRIPT,
    ".cts": TYPESCRIPT,
    ".tsx": TSX,
}

_GRAMMARS: Dict[str, Callable[[], object]] = {
    PYTHON: tree_sitter_python.language,
    JAVASCRIPT: tree_sitter_javascript.language,
    TYPESCRIPT: tree_sitter_typescript.language_typescript,
    TSX: tree_sitter_typescript.language_tsx,
}

_PY_DYNAMIC_CALLS = {"importlib.import_module", "import_module", "__import__"}
_TYPE_CHECKING_GUARDS = {"TYPE_CHECKING", "typing.TYPE_CHECKING"}

SYNTAX_WARNING = "PARSE-ERROR: syntax errors in file, imports may be incomplete"


def language_for_path(path: str) -> Optional[str]:
    lower = path.lower()
    dot = lower.rfind(".")
    if dot == -1 or "/" in lower[dot:]:
        return None
    return _LANGUAGE_BY_SUFFIX.get(lower[dot:])


class _Collector:
    """Ordered, de-duplicated specifiers plus the dynamic-import flag."""

    def __init__(self) -> None:
        self.specifiers: List[str] = []
        self._seen: set[str] = set()
        self.dynamic = False

    def add(self, specifier: Optional[str]) -> None:
        if not specifier or specifier in self._seen:
            return
        self._seen.add(specifier)
        self.specifiers.append(specifier)


class ImportParser:
    """Extracts import specifiers using cached tree-sitter parsers."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def supports(self, path: str) -> bool:
        return language_for_path(path) is not None

    def parse(self, file: str, source: str) -> ParsedFile:
        line_count = _count_lines(source)
        language_key = language_for_path(file)
        if language_key is None:
            return ParsedFile(file=file, line_count=line_count)

        tree = self._get_parser(language_key).parse(source.encode("utf-8"))
        root = tree.root_node
        collector = _Collector()
        if language_key == PYTHON:
            self._collect_python(root, collector)
        else:
            self._collect_script(root, collector)

        warnings: Tuple[str, ...] = (SYNTAX_WARNING,) if root.has_error else ()
        return ParsedFile(
            file=file,
            specifiers=tuple(collector.specifiers),
            dynamic=collector.dynamic,
            warnings=warnings,
            line_count=line_count,
        )

    def _get_parser(self, language_key: str) -> Parser:
        parser = self._parsers.get(language_key)
        if parser is None:
            parser = Parser(Language(_GRAMMARS[language_key]()))
            self._parsers[language_key] = parser
        return parser

    # ------------------------------------------------------------------
    # Python
    # ------------------------------------------------------------------
    def _collect_python(self, root: Node, collector: _Collector) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "import_statement":
                for name in node.children_by_field_name("name"):
                    collector.add(_python_module_name(name))
                continue
            if node.type == "import_from_statement":
                for specifier in _python_from_specifiers(node):
                    collector.add(specifier)
                continue
            if node.type == "if_statement" and _is_type_checking_guard(node):
                stack.extend(reversed(node.children_by_field_name("alternative")))
                continue
            if node.type == "call":
                function = node.child_by_field_name("function")
                if function is not None and _text(function) in _PY_DYNAMIC_CALLS:
                    collector.dynamic = True
                    collector.add(_first_literal_argument(node))
            stack.extend(reversed(node.children))

    # ------------------------------------------------------------------
    # JavaScript / TypeScript
    # ------------------------------------------------------------------
    def _collect_script(self, root: Node, collector: _Collector) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in {"import_statement", "export_statement"}:
                source = node.child_by_field_name("source")
                if source is not None and not _is_type_only(node):
                    collector.add(_string_literal(source))
            elif node.type == "import_require_clause":
                source = node.child_by_field_name("source")
                if source is not None:
                    collector.add(_string_literal(source))
            elif node.type == "call_expression":
                self._collect_call(node, collector)
            stack.extend(reversed(node.children))

    @staticmethod
    def _collect_call(node: Node, collector: _Collector) -> None:
        function = node.child_by_field_name("function")
        if function is None:
            return
        is_dynamic_import = function.type == "import"
        is_require = function.type == "identifier" and _text(function) == "require"
        if not (is_dynamic_import or is_require):
            return
        literal = _first_literal_argument(node)
        if literal is None or is_dynamic_import:
            collector.dynamic = True
        collector.add(literal)


def _python_module_name(node: Node) -> Optional[str]:
    if node.type == "aliased_import":
        name = node.child_by_field_name("name")
        return _text(name) if name is not None else None
    if node.type == "dotted_name":
        return _text(node)
    return None


def _python_from_specifiers(node: Node) -> Iterable[str]:
    module_node = node.child_by_field_name("module_name")
    if module_node is None:
        return []
    module = _text(module_node)
    if module == "__future__":
        return []
    names = [
        name
        for name in (_python_module_name(child) for child in node.children_by_field_name("name"))
        if name
    ]
    if not names:
        # wildcard import
        return [module]
    joiner = "" if module.endswith(".") else "."
    return [f"{module}{joiner}{name}" for name in names]


def _is_type_checking_guard(node: Node) -> bool:
    condition = node.child_by_field_name("condition")
    return condition is not None and _text(condition) in _TYPE_CHECKING_GUARDS


def _is_type_only(node: Node) -> bool:
    return any(child.type == "type" for child in node.children)


def _first_literal_argument(call: Node) -> Optional[str]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None or not arguments.named_children:
        return None
    return _string_literal(arguments.named_children[0])


def _string_literal(node: Node) -> Optional[str]:
    if node.type != "string":
        return None
    if any(child.type in {"interpolation", "template_substitution"} for child in node.children):
        return None
    value = _text(node).lstrip("rRbBuUfF")
    return value.strip("'\"`") or None


def _text(node: Node) -> str:
    raw = node.text
    return raw.decode("utf-8", errors="ignore") if raw is not None else ""


def _count_lines(source: str) -> int:
    if not source:
        return 0
    return source.count("\n") + (0 if source.endswith("\n") else 1)


def parse_source(file: str, source: str) -> ParsedFile:
    """Parse a single file with a fresh parser."""
    return ImportParser().parse(file, source)


__all__ = ["ImportParser", "SYNTAX_WARNING", "language_for_path", "parse_source"]

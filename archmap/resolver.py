"""Map import specifiers to repository files."""

from __future__ import annotations

import posixpath
from typing import Iterable, List, Optional, Sequence

from .models import EXTERNAL, INTERNAL, UNRESOLVED, ResolvedTarget
from .parsers.tree_sitter import PYTHON, language_for_path

_SCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts")
_JS_TO_TS = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}
_ALIAS_PREFIXES = ("@/", "~/")
_PYTHON_ROOTS = ("", "src/")


class ImportResolver:
    """Resolves specifiers against a fixed set of repository file ids.

    ``resolve`` never raises: every specifier yields an internal target, an
    external package name or an unresolved marker.
    """

    def __init__(self, files: Iterable[str]) -> None:
        self._files = frozenset(files)

    def __call__(self, from_id: str, specifier: str) -> ResolvedTarget:
        return self.resolve(from_id, specifier)

    def resolve(self, from_id: str, specifier: str) -> ResolvedTarget:
        if not specifier:
            return ResolvedTarget(UNRESOLVED)
        if language_for_path(from_id) == PYTHON:
            return self._resolve_python(from_id, specifier)
        return self._resolve_script(from_id, specifier)

    # ------------------------------------------------------------------
    # Python
    # ------------------------------------------------------------------
    def _resolve_python(self, from_id: str, specifier: str) -> ResolvedTarget:
        if specifier.startswith("."):
            level = len(specifier) - len(specifier.lstrip("."))
            package = posixpath.dirname(from_id)
            for _ in range(level - 1):
                if not package:
                    return ResolvedTarget(UNRESOLVED)
                package = posixpath.dirname(package)
            parts = [part for part in specifier[level:].split(".") if part]
            target = self._python_module(package, parts)
            if target is None:
                target = self._first_existing([_join(package, "__init__.py")])
            return ResolvedTarget(INTERNAL, target) if target else ResolvedTarget(UNRESOLVED)

        parts = [part for part in specifier.split(".") if part]
        if not parts:
            return ResolvedTarget(UNRESOLVED)
        roots: List[str] = list(_PYTHON_ROOTS)
        importer_dir = posixpath.dirname(from_id)
        if importer_dir and f"{importer_dir}/" not in roots:
            roots.append(importer_dir)
        for root in roots:
            target = self._python_module(root.rstrip("/"), parts)
            if target is not None:
                return ResolvedTarget(INTERNAL, target)
        return ResolvedTarget(EXTERNAL, parts[0])

    def _python_module(self, base: str, parts: Sequence[str]) -> Optional[str]:
        # Longest module path first so ``from a.b import c`` prefers a/b/c.py over a/b.py.
        for size in range(len(parts), 0, -1):
            module = _join(base, "/".join(parts[:size]))
            target = self._first_existing(
                [f"{module}.py", f"{module}/__init__.py", f"{module}.pyi"]
            )
            if target is not None:
                return target
        return None

    # ------------------------------------------------------------------
    # JavaScript / TypeScript
    # ------------------------------------------------------------------
    def _resolve_script(self, from_id: str, specifier: str) -> ResolvedTarget:
        if specifier.startswith(("./", "../")) or specifier in {".", ".."}:
            joined = posixpath.normpath(posixpath.join(posixpath.dirname(from_id), specifier))
            if joined == ".." or joined.startswith("../"):
                return ResolvedTarget(UNRESOLVED)
            target = self._probe_script("" if joined == "." else joined)
            return ResolvedTarget(INTERNAL, target) if target else ResolvedTarget(UNRESOLVED)

        if specifier.startswith("/"):
            target = self._probe_script(posixpath.normpath(specifier.lstrip("/")))
            return ResolvedTarget(INTERNAL, target) if target else ResolvedTarget(UNRESOLVED)

        if specifier.startswith(_ALIAS_PREFIXES):
            rest = specifier[2:]
            for root in ("src", ""):
                target = self._probe_script(_join(root, rest))
                if target is not None:
                    return ResolvedTarget(INTERNAL, target)
            return ResolvedTarget(UNRESOLVED)

        return ResolvedTarget(EXTERNAL, _package_name(specifier))

    def _probe_script(self, base: str) -> Optional[str]:
        candidates: List[str] = []
        if base:
            candidates.append(base)
            stem, extension = posixpath.splitext(base)
            for replacement in _JS_TO_TS.get(extension, ()):
                candidates.append(stem + replacement)
            candidates.extend(base + extension for extension in _SCRIPT_EXTENSIONS)
        candidates.extend(_join(base, f"index{extension}") for extension in _SCRIPT_EXTENSIONS)
        return self._first_existing(candidates)

    def _first_existing(self, candidates: Iterable[str]) -> Optional[str]:
        for candidate in candidates:
            if candidate in self._files:
                return candidate
        return None


def _join(base: str, rest: str) -> str:
    if not base:
        return rest
    if not rest:
        return base
    return f"{base}/{rest}"


def _package_name(specifier: str) -> str:
    if specifier.startswith("node:"):
        return specifier
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) >= 2:
        return "/".join(parts[:2])
    return parts[0]


__all__ = ["ImportResolver"]

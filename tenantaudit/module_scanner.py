"""Discovery and loading of candidate data-access modules."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .logging import get_logger, log_skipped_module
from .models import SourceModule

DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".mjs", ".cjs", ".ts")

# Reference implementations and the tenant registry itself are not retrofit targets.
DEFAULT_EXCLUDES: tuple[str, ...] = ("*EXAMPLE*", "*tenantsService*")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    "dist",
    "build",
    "coverage",
}

_LOGGER = get_logger("scanner")


@dataclass(frozen=True)
class ExclusionRule:
    """Shell-style pattern matched against a module's file name or relative path."""

    pattern: str

    def matches(self, rel_path: str) -> bool:
        if not self.pattern:
            return False
        if "/" in self.pattern:
            return fnmatchcase(rel_path, self.pattern)
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


def _normalise_extensions(extensions: Sequence[str]) -> tuple[str, ...]:
    normalised: List[str] = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        normalised.append(ext)
    return tuple(normalised)


class ModuleScanner:
    """Enumerates source modules in a directory and reads their text."""

    def __init__(
        self,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        excludes: Sequence[str] = DEFAULT_EXCLUDES,
        *,
        recursive: bool = False,
    ) -> None:
        self.extensions = _normalise_extensions(extensions)
        self.rules = tuple(ExclusionRule(pattern) for pattern in excludes if pattern)
        self.recursive = recursive

    def is_excluded(self, rel_path: str) -> bool:
        return any(rule.matches(rel_path) for rule in self.rules)

    def candidates(self, root: str | Path) -> List[Path]:
        """Return accepted file paths under ``root``.

        Raises ``FileNotFoundError``, ``NotADirectoryError`` or ``PermissionError``
        when the directory itself cannot be used. The order is whatever the
        filesystem yields.
        """
        root_path = _resolve_root(root)
        paths: List[Path] = []
        for path in self._iter_files(root_path):
            rel_path = path.relative_to(root_path).as_posix()
            if not rel_path.lower().endswith(self.extensions):
                continue
            if self.is_excluded(rel_path):
                _LOGGER.debug("Excluding reference module %s", rel_path)
                continue
            paths.append(path)
        return paths

    def read(self, path: Path, root: str | Path) -> Optional[SourceModule]:
        """Load one module, or return None with a warning when it is unreadable."""
        name = path.relative_to(Path(root).expanduser().resolve()).as_posix()
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            log_skipped_module(name, f"not valid UTF-8 text ({exc.reason})")
            return None
        except OSError as exc:
            log_skipped_module(name, str(exc.strerror or exc))
            return None
        return SourceModule(name=name, content=content)

    def scan(self, root: str | Path) -> Iterator[SourceModule]:
        """Return a lazy sequence of readable modules under ``root``.

        Directory validation happens before this returns, so configuration
        errors surface even if the result is never iterated.
        """
        root_path = _resolve_root(root)
        paths = self.candidates(root_path)
        return self._load(paths, root_path)

    def _load(self, paths: Sequence[Path], root: Path) -> Iterator[SourceModule]:
        for path in paths:
            module = self.read(path, root)
            if module is not None:
                yield module

    def _iter_files(self, root: Path) -> Iterator[Path]:
        if not self.recursive:
            with os.scandir(root) as entries:
                for entry in entries:
                    if entry.is_file():
                        yield Path(entry.path)
            return

        def _raise(exc: OSError) -> None:
            if Path(exc.filename or "") == root:
                raise exc
            _LOGGER.warning("Skipping directory %s: %s", exc.filename, exc.strerror or exc)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            dirnames[:] = [name for name in dirnames if name not in _EXCLUDED_DIRS]
            current_dir = Path(dirpath)
            for filename in filenames:
                yield current_dir / filename


def _resolve_root(root: str | Path) -> Path:
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Module directory not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Module path is not a directory: {root}")
    return root_path


__all__ = ["DEFAULT_EXCLUDES", "DEFAULT_EXTENSIONS", "ExclusionRule", "ModuleScanner"]

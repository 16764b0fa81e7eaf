"""Directory walking for annotated source files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .errors import SourceReadError
from .logging import get_logger
from .models import SourceFile

_LOGGER = get_logger("scanner")


@dataclass
class IgnoreRule:
    """Represents an exclude pattern from .ipcgen.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _log_walk_error(error: OSError) -> None:
    _LOGGER.warning("Error reading directory entry: %s", error)


class SourceScanner:
    """Walks an input tree in a stable order and yields matching source files."""

    def __init__(
        self,
        extensions: Iterable[str] = (".ts",),
        exclude_paths: Iterable[str] = (),
    ) -> None:
        self.extensions = tuple(extensions)
        self.rules: List[IgnoreRule] = [
            rule for rule in (build_ignore_rule(p) for p in exclude_paths) if rule is not None
        ]

    def iter_paths(self, root: Path) -> Iterator[Path]:
        """Yield candidate files under `root`, sorted within each directory."""
        root = Path(root)
        if not root.exists():
            raise FileNotFoundError(f"Input directory not found: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Input path is not a directory: {root}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if not _should_ignore(rel_path, True, self.rules):
                    kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                if not filename.endswith(self.extensions):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, self.rules):
                    continue
                path = current_dir / filename
                if path.is_file():
                    yield path

    def scan(self, root: Path) -> Iterator[SourceFile]:
        """Yield loaded source files; read errors propagate to the caller."""
        for path in self.iter_paths(root):
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                raise SourceReadError(f"Failed to read {path}: {exc}") from exc
            yield SourceFile(path=path, text=text)


__all__ = ["IgnoreRule", "SourceScanner", "build_ignore_rule"]

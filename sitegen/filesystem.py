"""File system access and path normalisation for the build engine."""

from __future__ import annotations

import hashlib
import os
import posixpath
import shutil
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

_EXCLUDED_DIRS = {".git", ".hg", ".svn", "node_modules", "__pycache__", ".sitegen"}
_EXCLUDED_FILES = {".DS_Store", "Thumbs.db"}


@dataclass(frozen=True)
class ExcludeRule:
    """One ``exclude_paths`` entry, matched against source-relative paths.

    ``drafts/`` only matches directories, a leading ``/`` or any inner slash
    anchors the glob at the source root, and a bare glob matches any path
    segment.
    """

    glob: str
    directories_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, entry: str) -> "ExcludeRule | None":
        glob = entry.strip()
        directories_only = glob.endswith("/")
        glob = glob.rstrip("/")
        anchored = glob.startswith("/") or "/" in glob.lstrip("/")
        glob = glob.lstrip("/")
        if not glob:
            return None
        return cls(glob, directories_only, anchored)

    def excludes(self, rel_path: str, is_dir: bool) -> bool:
        if self.directories_only and not is_dir:
            return False
        if self.anchored:
            return fnmatchcase(rel_path, self.glob)
        return any(fnmatchcase(segment, self.glob) for segment in rel_path.split("/"))


def parse_exclude_rules(entries: Sequence[str]) -> List[ExcludeRule]:
    return [rule for rule in map(ExcludeRule.parse, entries) if rule is not None]


def hash_content(content: bytes | str) -> str:
    """Return the content digest used to detect changes."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


class FileSystem:
    """Thin wrapper over the local disk using absolute forward-slash paths."""

    def __init__(self, exclude_paths: Sequence[str] | None = None) -> None:
        self._rules = parse_exclude_rules(exclude_paths or [])

    def clear_path(self, *segments: str) -> str:
        """Join ``segments`` into a normalised absolute path with forward slashes."""
        parts = [str(segment).replace("\\", "/") for segment in segments if str(segment)]
        if not parts:
            parts = ["."]
        joined = posixpath.join(*parts)
        if not posixpath.isabs(joined) and not _has_drive(joined):
            joined = posixpath.join(Path.cwd().as_posix(), joined)
        return posixpath.normpath(joined)

    def get_extension(self, path: str) -> str:
        return posixpath.splitext(path)[1][1:].lower()

    def get_directory(self, path: str) -> str:
        return posixpath.dirname(self.clear_path(path))

    def get_name(self, path: str) -> str:
        return posixpath.basename(path)

    def relative_path(self, path: str, root: str) -> str:
        return posixpath.relpath(self.clear_path(path), self.clear_path(root))

    def check_if_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_file(self, path: str) -> str:
        """Read ``path`` as UTF-8; undecodable bytes become U+FFFD."""
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            return handle.read()

    def read_bytes(self, path: str) -> bytes:
        with open(path, "rb") as handle:
            return handle.read()

    def create_or_overwrite_file(self, path: str, content: str) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(content)

    def create_directory(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def delete(self, path: str) -> None:
        if os.path.isdir(path):
            shutil.rmtree(path)
        elif os.path.exists(path):
            os.remove(path)

    def copy(self, source: str, target: str) -> None:
        directory = os.path.dirname(target)
        if directory:
            os.makedirs(directory, exist_ok=True)
        shutil.copyfile(source, target)

    def get_files_recursively(self, root: str) -> List[str]:
        """Return every file under ``root`` in a deterministic order."""
        root_path = self.clear_path(root)
        if not os.path.isdir(root_path):
            raise NotADirectoryError(f"Source directory not found: {root}")
        return list(self._iter_files(root_path))

    def _excluded(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.excludes(rel_path, is_dir) for rule in self._rules)

    def _iter_files(self, root: str) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = self.clear_path(dirpath)
            rel_dir = posixpath.relpath(current_dir, root) if current_dir != root else ""

            kept_dirs = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._excluded(rel_path, True):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                if filename in _EXCLUDED_FILES:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._excluded(rel_path, False):
                    continue
                yield f"{current_dir}/{filename}"


def _has_drive(path: str) -> bool:
    return len(path) > 1 and path[1] == ":"


__all__ = ["ExcludeRule", "FileSystem", "hash_content", "parse_exclude_rules"]

"""In-memory archive representation shared by zip bundles and directories.

An :class:`Archive` is a flat, ordered mapping of posix-style relative paths to
:class:`ArchiveEntry` objects.  Folder entries are derived from path segments
and created idempotently; file entries carry a *lazy* byte source, so nothing
is read from disk (or decompressed) until the entry is actually consumed.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import BinaryIO

ByteSource = Callable[[], BinaryIO]


@dataclass(frozen=True)
class ArchiveEntry:
    """A single archive member: either a folder marker or a lazily-read file."""

    path: str
    is_dir: bool = False
    source: ByteSource | None = None

    @property
    def name(self) -> str:
        """Last path segment."""
        return self.path.rsplit("/", 1)[-1]

    def open(self) -> BinaryIO:
        """Open the underlying byte stream.  Callers own the returned handle."""
        if self.is_dir or self.source is None:
            raise IsADirectoryError(f"Archive entry {self.path!r} is a folder")
        return self.source()

    def read_bytes(self) -> bytes:
        with self.open() as stream:
            return stream.read()

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.read_bytes().decode(encoding)


def _split(path: str) -> list[str]:
    return [seg for seg in path.replace("\\", "/").split("/") if seg not in ("", ".")]


class Archive:
    """Hierarchical collection of named byte streams, organised by path.

    ``folder()`` returns a *view* rooted at a sub-folder that shares storage
    with its parent, so ``archive.folder("a").folder("b").file("c.js", src)``
    stores a single file entry at ``a/b/c.js`` (plus folder entries ``a`` and
    ``a/b``).
    """

    def __init__(self) -> None:
        self._entries: dict[str, ArchiveEntry] = {}
        self._root = ""

    # -- Views -------------------------------------------------------------

    def _view(self, root: str) -> "Archive":
        view = Archive.__new__(Archive)
        view._entries = self._entries
        view._root = root
        return view

    def _full(self, relative: str) -> str:
        segments = _split(relative)
        if not segments:
            raise ValueError("Archive paths must not be empty")
        return self._root + "/".join(segments)

    @property
    def root(self) -> str:
        """Prefix of this view (``""`` for the archive itself, else ``"a/b/"``)."""
        return self._root

    # -- Mutation ----------------------------------------------------------

    def folder(self, name: str) -> "Archive":
        """Create (idempotently) the folder chain for *name* and return a view of it.

        An empty or ``"."`` name returns this view unchanged.
        """
        current = self._root
        for segment in _split(name):
            path = current + segment
            existing = self._entries.get(path)
            if existing is None:
                self._entries[path] = ArchiveEntry(path=path, is_dir=True)
            elif not existing.is_dir:
                raise ValueError(f"Cannot create folder {path!r}: a file already exists there")
            current = path + "/"
        return self._view(current)

    def file(self, name: str, source: ByteSource) -> ArchiveEntry:
        """Add a file entry at *name* (relative to this view).

        Parent folders implied by *name* are created as well.  Re-adding a file
        at the same path replaces the previous source.
        """
        full = self._full(name)
        parent, _, _ = full.rpartition("/")
        if parent:
            self._view("").folder(parent)
        existing = self._entries.get(full)
        if existing is not None and existing.is_dir:
            raise ValueError(f"Cannot add file {full!r}: a folder already exists there")
        entry = ArchiveEntry(path=full, source=source)
        self._entries[full] = entry
        return entry

    # -- Queries -----------------------------------------------------------

    def get(self, path: str) -> ArchiveEntry | None:
        segments = _split(path)
        if not segments:
            return None
        return self._entries.get(self._root + "/".join(segments))

    def relative(self, entry: ArchiveEntry) -> str:
        """Path of *entry* relative to this view."""
        return entry.path[len(self._root):]

    def _members(self) -> Iterator[ArchiveEntry]:
        for path, entry in self._entries.items():
            if path.startswith(self._root):
                yield entry

    def files(self, pattern: str | re.Pattern[str] | None = None) -> list[ArchiveEntry]:
        """File entries under this view, optionally filtered by a regex.

        The pattern is searched against each entry's path relative to the view.
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [
            entry
            for entry in self._members()
            if not entry.is_dir and (regex is None or regex.search(self.relative(entry)))
        ]

    def folders(self) -> list[ArchiveEntry]:
        return [entry for entry in self._members() if entry.is_dir]

    def __len__(self) -> int:
        return sum(1 for _ in self._members())

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return self._members()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.get(path) is not None

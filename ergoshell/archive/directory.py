"""Directory-to-archive conversion.

Bundles are handled at the archive level, so a plain folder used as input is
first turned into an in-memory :class:`Archive` with the same relative paths.
Files are attached as lazy sources: nothing is read until the unpacker asks
for a specific entry.
"""

from __future__ import annotations

import asyncio
import functools
import os
import stat
from pathlib import Path

from .models import Archive


async def list_files_in_dir(directory: str | Path) -> list[Path]:
    """Return the absolute paths of every file below *directory*.

    The per-entry ``stat`` calls for one directory level run concurrently, so
    the order of the result is not significant.
    """
    root = Path(directory).resolve()
    names = await asyncio.to_thread(os.listdir, root)

    async def _visit(name: str) -> list[Path]:
        full_path = root / name
        st = await asyncio.to_thread(os.stat, full_path)
        if stat.S_ISDIR(st.st_mode):
            return await list_files_in_dir(full_path)
        return [full_path]

    nested = await asyncio.gather(*[_visit(name) for name in names])
    return [path for group in nested for path in group]


async def zip_from_dir(directory: str | Path) -> Archive:
    """Build an :class:`Archive` mirroring the file tree under *directory*.

    Raises:
        OSError: If any part of the tree cannot be listed or stat-ed.  No
            partial archive is returned.
    """
    abs_root = Path(directory).resolve()
    file_paths = await list_files_in_dir(abs_root)

    archive = Archive()
    for file_path in file_paths:
        relative = file_path.relative_to(abs_root)
        zip_folder = archive
        for dir_name in relative.parent.parts:
            zip_folder = zip_folder.folder(dir_name)
        zip_folder.file(relative.name, functools.partial(file_path.open, "rb"))
    return archive

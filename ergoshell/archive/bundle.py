"""Zip bundle loading and unpacking.

A bundle is an archive with exactly one ``config.<ext>`` at its root plus
optional ``footprints/`` and ``templates/`` folders of JavaScript sources that
are injected into the engine before processing.  Directories are converted to
the same :class:`Archive` shape first, so both inputs unpack identically.
"""

from __future__ import annotations

import asyncio
import functools
import io
import re
import zipfile
from pathlib import Path

from ..errors import BundleError
from ..models import Injection, InjectionType, UnpackedBundle
from .models import Archive

BUNDLE_SUFFIXES: tuple[str, ...] = (".zip", ".ekb")

_CONFIG_PATTERN = re.compile(r"^config\.(yaml|json|js)$")
_INJECTION_PATTERN = re.compile(r"\.js$")

# Folder name -> injection type, in registration order.
INJECTION_FOLDERS: dict[str, InjectionType] = {
    "footprints": InjectionType.FOOTPRINT,
    "templates": InjectionType.TEMPLATE,
}


def is_bundle_path(path: str | Path) -> bool:
    """True if *path* has one of the recognised archive suffixes."""
    return str(path).lower().endswith(BUNDLE_SUFFIXES)


def archive_from_zipfile(zf: zipfile.ZipFile) -> Archive:
    """Map the members of an open zip onto an :class:`Archive`.

    Members are decompressed lazily, on first read.
    """
    archive = Archive()
    for info in zf.infolist():
        if info.is_dir():
            archive.folder(info.filename)
        else:
            archive.file(info.filename, functools.partial(zf.open, info))
    return archive


async def load_zip(path: str | Path) -> Archive:
    """Read a zip bundle from disk into an :class:`Archive`.

    Raises:
        OSError: If the file cannot be read.
        zipfile.BadZipFile: If the file is not a valid zip archive.
    """
    data = await asyncio.to_thread(Path(path).read_bytes)
    return archive_from_zipfile(zipfile.ZipFile(io.BytesIO(data)))


def _injection_name(relative: str) -> str:
    """``mx/hotswap.js`` -> ``mx/hotswap``."""
    folder, _, filename = relative.rpartition("/")
    stem = filename.split(".", 1)[0]
    return f"{folder}/{stem}" if folder else stem


def _collect_injections(archive: Archive) -> list[Injection]:
    injections: list[Injection] = []
    for folder_name, injection_type in INJECTION_FOLDERS.items():
        if archive.get(folder_name) is None:
            continue
        folder = archive.folder(folder_name)
        for entry in sorted(folder.files(_INJECTION_PATTERN), key=lambda e: e.path):
            injections.append(
                Injection(
                    type=injection_type.value,
                    name=_injection_name(folder.relative(entry)),
                    value=entry.read_text(),
                )
            )
    return injections


def unpack_sync(archive: Archive) -> UnpackedBundle:
    """Split *archive* into config text and injections (blocking)."""
    candidates = [
        entry
        for entry in archive.files(_CONFIG_PATTERN)
        if "/" not in archive.relative(entry)
    ]
    if len(candidates) != 1:
        raise BundleError("Ambiguous config in bundle!")

    return UnpackedBundle(
        config_text=candidates[0].read_text(),
        injections=tuple(_collect_injections(archive)),
    )


async def unpack(archive: Archive) -> UnpackedBundle:
    """Split *archive* into config text and injections.

    Raises:
        BundleError: If the archive has zero or several root configs.
        UnicodeDecodeError: If a config or injection is not valid UTF-8.
    """
    return await asyncio.to_thread(unpack_sync, archive)

"""Config source resolution.

Turns a config path into an :class:`UnpackedBundle`.  Zip bundles are loaded
directly, directories are archived in memory first so both go through the same
unpacker, and anything else is read as plain config text.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from .archive import is_bundle_path, load_zip, unpack, zip_from_dir
from .engine import InjectionRegistry
from .errors import ResolutionError
from .models import UnpackedBundle
from .utils import print_info


async def _read_text(path: Path) -> str:
    return await asyncio.to_thread(path.read_text, encoding="utf-8")


async def read_config(config_file: str | Path, registry: InjectionRegistry) -> UnpackedBundle:
    """Resolve *config_file* and register its injections with *registry*.

    Injections are registered in bundle order before this returns, so the
    registry is complete by the time the engine sees the config text.

    Raises:
        ResolutionError: If the path cannot be read, enumerated, or unpacked.
    """
    path = Path(config_file)
    try:
        if is_bundle_path(path):
            print_info("Analyzing bundle...")
            bundle = await unpack(await load_zip(path))
        elif await asyncio.to_thread(path.is_dir):
            print_info("Analyzing folder...")
            bundle = await unpack(await zip_from_dir(path))
        else:
            bundle = UnpackedBundle(config_text=await _read_text(path))

        for injection in bundle.injections:
            registry.inject(injection.type, injection.name, injection.value)
    except Exception as exc:
        raise ResolutionError(config_file, str(exc) or type(exc).__name__) from exc

    return bundle

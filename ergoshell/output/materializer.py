"""Writes an engine ``ResultTree`` onto the output directory.

Two writers do all the work:

* :func:`single` writes one payload to one file, serialising it as YAML when
  the target ends in ``.yaml`` and verbatim otherwise.
* :func:`composite` writes a :class:`CompositeArtifact` as sibling files that
  share a base name (``<base>.yaml``, ``<base>.svg``, ...).

Both are no-ops for absent (``None``) payloads and never create a directory
they do not write into.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from ..errors import MaterializationError
from ..models import CompositeArtifact, ResultTree
from ..utils import print_info

YAML_SUFFIX = ".yaml"
PCB_SUFFIX = ".kicad_pcb"

# Verbatim formats of a composite artifact, in write order.
COMPOSITE_FORMATS: tuple[str, ...] = ("svg", "dxf", "jscad")


# ---------------------------------------------------------------------------
# YAML serialisation
# ---------------------------------------------------------------------------


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that expands shared sub-structures instead of aliasing them."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_tuple(dumper: yaml.SafeDumper, data: tuple) -> yaml.Node:
    return dumper.represent_list(list(data))


_NoAliasDumper.add_representer(tuple, _represent_tuple)


def yamldump(data: Any) -> str:
    """Serialise *data* as block-style YAML with 4-space indentation.

    Key order is preserved and no anchors or aliases are emitted, so the same
    value always produces the same text.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return yaml.dump(
        data,
        Dumper=_NoAliasDumper,
        indent=4,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


# ---------------------------------------------------------------------------
# Low-level writes
# ---------------------------------------------------------------------------


def _write_sync(path: Path, content: str | bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")


async def _write(path: Path, content: str | bytes) -> Path:
    try:
        await asyncio.to_thread(_write_sync, path, content)
    except OSError as exc:
        raise MaterializationError(path, exc.strerror or str(exc)) from exc
    return path


def _verbatim(data: Any) -> str | bytes:
    if isinstance(data, (str, bytes)):
        return data
    return str(data)


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


async def single(data: Any, output_directory: str | Path, rel: str) -> Path | None:
    """Write *data* to ``output_directory / rel``.

    Returns:
        The written path, or ``None`` if *data* was absent.

    Raises:
        MaterializationError: If the file cannot be written.
    """
    if data is None:
        return None
    target = Path(output_directory) / rel
    if target.name.endswith(YAML_SUFFIX):
        return await _write(target, yamldump(data))
    return await _write(target, _verbatim(data))


async def composite(
    data: CompositeArtifact | None, output_directory: str | Path, rel: str
) -> list[Path]:
    """Write every present format of *data* next to ``output_directory / rel``.

    Returns:
        The written paths, YAML first, then :data:`COMPOSITE_FORMATS` order.

    Raises:
        MaterializationError: If any file cannot be written.
    """
    if data is None:
        return []
    base = Path(output_directory) / rel
    written: list[Path] = []
    if data.yaml is not None:
        written.append(await _write(base.with_name(base.name + YAML_SUFFIX), yamldump(data.yaml)))
    for fmt in COMPOSITE_FORMATS:
        value = getattr(data, fmt)
        if value is not None:
            written.append(await _write(base.with_name(f"{base.name}.{fmt}"), _verbatim(value)))
    return written


# ---------------------------------------------------------------------------
# Full result tree
# ---------------------------------------------------------------------------


def _remove_tree(root: Path) -> None:
    try:
        shutil.rmtree(root)
    except FileNotFoundError:
        pass


async def prepare_output_dir(output_directory: str | Path, clean: bool) -> Path:
    """Optionally wipe, then (re)create the output root.

    Raises:
        MaterializationError: If the old root cannot be fully removed or the
            new one cannot be created.
    """
    root = Path(output_directory)
    try:
        if clean:
            print_info("Cleaning output folder...")
            await asyncio.to_thread(_remove_tree, root)
        print_info("Writing output to disk...")
        await asyncio.to_thread(root.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise MaterializationError(root, exc.strerror or str(exc)) from exc
    return root


async def generate_output(
    results: ResultTree, output_directory: str | Path, clean: bool = False
) -> list[Path]:
    """Materialise *results* under *output_directory* using the fixed layout.

    Returns:
        Every path written, in write order.
    """
    root = await prepare_output_dir(output_directory, clean)
    written: list[Path] = []

    async def _single(data: Any, rel: str) -> None:
        path = await single(data, root, rel)
        if path is not None:
            written.append(path)

    async def _composite(data: CompositeArtifact | None, rel: str) -> None:
        written.extend(await composite(data, root, rel))

    await _single(results.raw, "source/raw.txt")
    await _single(results.canonical, "source/canonical.yaml")

    await _single(results.units, "points/units.yaml")
    await _single(results.points, "points/points.yaml")
    await _composite(results.demo, "points/demo")

    for name, outline in results.outlines.items():
        await _composite(outline, f"outlines/{name}")

    for name, case in results.cases.items():
        await _composite(case, f"cases/{name}")

    for name, pcb in results.pcbs.items():
        await _single(pcb, f"pcbs/{name}{PCB_SUFFIX}")

    return written

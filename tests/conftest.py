"""Shared pytest fixtures for the ergoshell test suite.

Provides reusable fixtures for:
- Sample config files, folders, and zip bundles
- A fully populated and a points-only ResultTree
- A fake engine that records calls instead of talking to a service
- A Config pointing at a temporary output folder
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Any

import pytest

from ergoshell.config import Config
from ergoshell.engine import InjectionRegistry
from ergoshell.models import CompositeArtifact, ResultTree


SAMPLE_CONFIG = """\
units:
    kx: 18
points:
    zones:
        matrix:
            columns:
                pinky:
                ring:
            rows:
                bottom:
                home:
"""

CUSTOM_FOOTPRINT = """\
module.exports = {
    params: { designator: 'X' },
    body: p => `(module custom ${p.at})`
}
"""

CHOC_TEMPLATE = """\
module.exports = (params) => `(kicad_pcb ${params.name})`
"""


# ---------------------------------------------------------------------------
# Config sources
# ---------------------------------------------------------------------------

@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Plain YAML config file."""
    path = tmp_path / "config.yaml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Folder with a root config and one bundled footprint."""
    root = tmp_path / "board"
    (root / "footprints").mkdir(parents=True)
    (root / "config.yaml").write_text(SAMPLE_CONFIG, encoding="utf-8")
    (root / "footprints" / "custom.js").write_text(CUSTOM_FOOTPRINT, encoding="utf-8")
    return root


@pytest.fixture
def rich_config_dir(tmp_path: Path) -> Path:
    """Folder with nested footprints, a template, and unrelated files."""
    root = tmp_path / "rich-board"
    (root / "footprints" / "mx").mkdir(parents=True)
    (root / "templates").mkdir(parents=True)
    (root / "docs").mkdir(parents=True)
    (root / "config.yaml").write_text(SAMPLE_CONFIG, encoding="utf-8")
    (root / "footprints" / "custom.js").write_text(CUSTOM_FOOTPRINT, encoding="utf-8")
    (root / "footprints" / "mx" / "hotswap.js").write_text("module.exports = {}\n", encoding="utf-8")
    (root / "footprints" / "README.md").write_text("not a footprint\n", encoding="utf-8")
    (root / "templates" / "choc.js").write_text(CHOC_TEMPLATE, encoding="utf-8")
    (root / "docs" / "notes.txt").write_text("notes\n", encoding="utf-8")
    return root


def zip_directory(source: Path, target: Path) -> Path:
    """Zip *source* into *target* with paths relative to *source*."""
    with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zf:
        for path in sorted(source.rglob("*")):
            if path.is_file():
                zf.write(path, path.relative_to(source).as_posix())
    return target


@pytest.fixture
def config_bundle(tmp_path: Path, config_dir: Path) -> Path:
    """``.ekb`` bundle with the same content as ``config_dir``."""
    return zip_directory(config_dir, tmp_path / "board.ekb")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@pytest.fixture
def full_results() -> ResultTree:
    """A result tree with every kind of artifact present."""
    return ResultTree(
        raw=SAMPLE_CONFIG,
        canonical={"units": {"kx": 18}, "points": {"zones": {"matrix": {}}}},
        units={"kx": 18, "u": 19, "$default_width": 18},
        points={"matrix_pinky_bottom": {"x": 0, "y": 0, "r": 0}},
        demo=CompositeArtifact(
            yaml={"models": {}},
            svg="<svg>demo</svg>",
            dxf="0\nSECTION\n",
        ),
        outlines={
            "board": CompositeArtifact(yaml={"paths": []}, svg="<svg/>", dxf="0\nEOF\n"),
            "plate": CompositeArtifact(dxf="0\nEOF\n"),
        },
        cases={"bottom": CompositeArtifact(jscad="function main() {}")},
        pcbs={"main": "(kicad_pcb (version 20171130))"},
    )


@pytest.fixture
def points_only_results() -> ResultTree:
    """What the engine produces for a config with only a ``points`` section."""
    return ResultTree(
        raw=SAMPLE_CONFIG,
        canonical={"points": {}},
        units={"u": 19},
        points={"matrix_pinky_bottom": {"x": 0, "y": 0}},
    )


# ---------------------------------------------------------------------------
# Fake engine
# ---------------------------------------------------------------------------

class FakeEngine:
    """Engine stand-in that records every call.

    ``calls`` holds ``(config_text, debug, injections_at_call_time)`` tuples.
    Set ``error`` to make the next calls raise.
    """

    def __init__(self, results: ResultTree | None = None, logs: list[str] | None = None) -> None:
        self.results = results if results is not None else ResultTree()
        self.logs = logs or []
        self.error: Exception | None = None
        self.calls: list[tuple[str, bool, tuple[Any, ...]]] = []

    async def process(
        self,
        config_text: str,
        debug: bool,
        log,
        registry: InjectionRegistry,
    ) -> ResultTree:
        self.calls.append((config_text, debug, registry.injections))
        for line in self.logs:
            log(line)
        if self.error is not None:
            raise self.error
        return self.results


@pytest.fixture
def fake_engine(full_results: ResultTree) -> FakeEngine:
    return FakeEngine(full_results)


@pytest.fixture
def run_config(tmp_path: Path) -> Config:
    """Config writing into ``tmp_path / "output"``."""
    return Config(output_dir=tmp_path / "output")


@pytest.fixture
def engine_factory():
    """The ``FakeEngine`` class, for tests that need custom results."""
    return FakeEngine


@pytest.fixture
def make_zip():
    """``zip_directory(source, target)`` helper."""
    return zip_directory

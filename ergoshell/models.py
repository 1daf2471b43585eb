"""Pydantic v2 models shared across ergoshell.

Covers the unpacked input bundle (config text plus injections), the engine's
result tree, and the outcome record returned by the generation orchestrator.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Input side
# ---------------------------------------------------------------------------

class InjectionType(str, Enum):
    """Categories of auxiliary resources a bundle may carry."""
    FOOTPRINT = "footprint"
    TEMPLATE = "template"


class Injection(BaseModel):
    """A named auxiliary resource registered with the engine before processing."""
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Injection category, e.g. 'footprint'")
    name: str = Field(..., description="Resource name, e.g. 'custom' or 'mx/hotswap'")
    value: str = Field(..., description="Resource source text")


class UnpackedBundle(BaseModel):
    """Config text plus the injections found alongside it."""
    model_config = ConfigDict(frozen=True)

    config_text: str = Field(default="")
    injections: tuple[Injection, ...] = Field(default=())


# ---------------------------------------------------------------------------
# Engine results
# ---------------------------------------------------------------------------

class CompositeArtifact(BaseModel):
    """An output unit rendered in up to four sibling formats.

    ``None`` marks a format that was not produced.  ``yaml`` holds structured
    data; the other formats hold ready-to-write text.
    """
    yaml: Optional[Any] = None
    svg: Optional[str] = None
    dxf: Optional[str] = None
    jscad: Optional[str] = None


class ResultTree(BaseModel):
    """Everything the engine produced for one config.

    Singleton payloads are ``None`` when not produced.  The named maps are
    empty when the config defines no such artifacts; a ``None`` entry marks a
    single named artifact that was not produced.
    """
    raw: Optional[str] = None
    canonical: Optional[Any] = None
    units: Optional[Any] = None
    points: Optional[Any] = None
    demo: Optional[CompositeArtifact] = None
    outlines: dict[str, Optional[CompositeArtifact]] = Field(default_factory=dict)
    cases: dict[str, Optional[CompositeArtifact]] = Field(default_factory=dict)
    pcbs: dict[str, Optional[str]] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Orchestrator outcome
# ---------------------------------------------------------------------------

class GenerationStage(str, Enum):
    """Where a generation run failed."""
    PROCESS = "process"
    OUTPUT = "output"


class GenerationOutcome(BaseModel):
    """Result of one orchestrator run.  Failures are reported, never raised."""

    success: bool = Field(default=True)
    stage: Optional[GenerationStage] = Field(
        default=None, description="Stage that failed, or None on success"
    )
    error: Optional[str] = Field(default=None, description="Error message on failure")
    duration_seconds: float = Field(default=0.0, ge=0.0)
    files_written: list[str] = Field(default_factory=list)

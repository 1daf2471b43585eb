"""Output materialization: ResultTree -> files on disk."""

from .materializer import (
    COMPOSITE_FORMATS,
    PCB_SUFFIX,
    composite,
    generate_output,
    prepare_output_dir,
    single,
    yamldump,
)

__all__ = [
    "COMPOSITE_FORMATS",
    "PCB_SUFFIX",
    "composite",
    "generate_output",
    "prepare_output_dir",
    "single",
    "yamldump",
]

"""Boundary to the external layout generation engine."""

from .client import Engine, EngineClient, LogSink
from .registry import InjectionRegistry

__all__ = [
    "Engine",
    "EngineClient",
    "InjectionRegistry",
    "LogSink",
]

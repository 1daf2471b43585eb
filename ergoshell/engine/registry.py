"""Per-run registry of injected engine resources.

Each resolve builds its own registry and hands it to the engine together with
the config text, so injections from one config never leak into another run in
the same process.
"""

from __future__ import annotations

from collections.abc import Iterator

from ..models import Injection


class InjectionRegistry:
    """Ordered collection of injections.  Later ``(type, name)`` pairs win on lookup."""

    def __init__(self) -> None:
        self._injections: list[Injection] = []

    def inject(self, type: str, name: str, value: str) -> Injection:
        injection = Injection(type=type, name=name, value=value)
        self._injections.append(injection)
        return injection

    @property
    def injections(self) -> tuple[Injection, ...]:
        """Every registration, in the order it was made."""
        return tuple(self._injections)

    def lookup(self, type: str, name: str) -> Injection | None:
        for injection in reversed(self._injections):
            if injection.type == type and injection.name == name:
                return injection
        return None

    def as_payload(self) -> list[dict[str, str]]:
        return [injection.model_dump() for injection in self._injections]

    def __len__(self) -> int:
        return len(self._injections)

    def __iter__(self) -> Iterator[Injection]:
        return iter(self._injections)

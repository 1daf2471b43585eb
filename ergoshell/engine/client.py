"""Async client for the layout generation engine service.

The engine runs as a separate HTTP service.  ``POST /process`` takes the config
text, the debug flag, and the registered injections, and answers with the log
lines produced during generation plus the result tree::

    {"logs": ["Interpreting units...", ...], "results": {"points": {...}, ...}}

Typical usage::

    client = EngineClient("http://localhost:23100")
    results = await client.process(config_text, False, print, registry)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

import httpx
from pydantic import ValidationError

from ..errors import EngineError
from ..models import ResultTree
from .registry import InjectionRegistry

LogSink = Callable[[str], None]


class Engine(Protocol):
    """Anything that turns config text plus injections into a ``ResultTree``."""

    async def process(
        self,
        config_text: str,
        debug: bool,
        log: LogSink,
        registry: InjectionRegistry,
    ) -> ResultTree: ...


class EngineClient:
    """Async client for the engine REST API.

    Uses ``httpx.AsyncClient`` for non-blocking HTTP.  Every failure mode is
    reported as :class:`EngineError` so the orchestrator has a single error
    type to isolate.
    """

    def __init__(self, base_url: str = "http://localhost:23100", timeout: int = 120) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    @staticmethod
    def _extract_logs(data: dict) -> list[str]:
        logs = data.get("logs") or []
        return [str(line) for line in logs]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def process(
        self,
        config_text: str,
        debug: bool,
        log: LogSink,
        registry: InjectionRegistry,
    ) -> ResultTree:
        """Run the engine on *config_text*.

        Args:
            config_text: Raw configuration text (YAML, JSON, or JS).
            debug: Ask the engine for debug output.
            log: Receives each engine log line, in order.
            registry: Injections to register before processing.

        Returns:
            The parsed ``ResultTree``.

        Raises:
            EngineError: On connection failure, timeout, non-2xx status, or a
                reply that does not match the result tree shape.
        """
        payload = {
            "config": config_text,
            "debug": debug,
            "injections": registry.as_payload(),
        }

        try:
            async with self._client() as client:
                response = await client.post("/process", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError as exc:
            raise EngineError(
                f"Cannot connect to the engine at {self.base_url}. Is the service running?"
            ) from exc
        except httpx.TimeoutException as exc:
            raise EngineError(f"Request to the engine timed out after {self.timeout}s.") from exc
        except httpx.HTTPStatusError as exc:
            raise EngineError(
                f"Engine returned HTTP {exc.response.status_code}: {exc.response.text[:500]}"
            ) from exc
        except ValueError as exc:
            raise EngineError(f"Engine reply is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise EngineError("Engine reply must be a JSON object")

        for line in self._extract_logs(data):
            log(line)

        if data.get("error"):
            raise EngineError(str(data["error"]))

        try:
            return ResultTree.model_validate(data.get("results") or {})
        except ValidationError as exc:
            raise EngineError(f"Engine reply has an unexpected shape: {exc}") from exc

    async def is_available(self) -> bool:
        """Return ``True`` if the engine answers ``GET /health`` with 200."""
        try:
            async with self._client() as client:
                response = await client.get("/health")
                return response.status_code == 200
        except httpx.HTTPError:
            return False

"""ergoshell configuration.

Typed settings for a single CLI session. All settings use Pydantic v2 models so
they are validated at construction time and can be serialised to/from JSON or
read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, Field, ValidationError

from .errors import UsageError


_TRUTHY = {"1", "true", "yes", "on"}


def _env_number(name: str, cast: Callable[[str], Any]) -> Any:
    """Read a numeric environment variable, or ``None`` if unset or empty."""
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise UsageError(f'Invalid value for {name}: "{raw}" is not a number') from exc


class EngineConfig(BaseModel):
    """Where and how to reach the generation engine service."""

    url: str = Field(default="http://localhost:23100")
    timeout: int = Field(default=120, ge=1, description="Per-request timeout in seconds")


class WatchConfig(BaseModel):
    """Tuning knobs for watch mode."""

    interval: float = Field(
        default=0.5, gt=0, description="Seconds between filesystem polls"
    )


class Config(BaseModel):
    """Settings for one ergoshell run.

    Built by the CLI from environment defaults plus command-line flags and
    then passed to the orchestrator and the watch loop.
    """

    config_path: Path | None = Field(default=None)
    output_dir: Path = Field(default=Path("./output"))
    debug: bool = Field(default=False)
    clean: bool = Field(default=False, description="Remove the output root before writing")
    watch: bool = Field(default=False)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    watch_settings: WatchConfig = Field(default_factory=WatchConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            ERGOSHELL_OUTPUT_DIR, ERGOSHELL_DEBUG, ERGOSHELL_CLEAN,
            ERGOSHELL_ENGINE_URL, ERGOSHELL_ENGINE_TIMEOUT,
            ERGOSHELL_WATCH_INTERVAL.

        Raises:
            UsageError: If a numeric variable is malformed or out of range.
        """
        engine_kwargs: dict[str, Any] = {}
        if os.environ.get("ERGOSHELL_ENGINE_URL"):
            engine_kwargs["url"] = os.environ["ERGOSHELL_ENGINE_URL"]
        timeout = _env_number("ERGOSHELL_ENGINE_TIMEOUT", int)
        if timeout is not None:
            engine_kwargs["timeout"] = timeout

        watch_kwargs: dict[str, Any] = {}
        interval = _env_number("ERGOSHELL_WATCH_INTERVAL", float)
        if interval is not None:
            watch_kwargs["interval"] = interval

        try:
            return cls(
                output_dir=Path(os.environ.get("ERGOSHELL_OUTPUT_DIR", "./output")),
                debug=os.environ.get("ERGOSHELL_DEBUG", "").lower() in _TRUTHY,
                clean=os.environ.get("ERGOSHELL_CLEAN", "").lower() in _TRUTHY,
                engine=EngineConfig(**engine_kwargs),
                watch_settings=WatchConfig(**watch_kwargs),
            )
        except ValidationError as exc:
            raise UsageError(f"Invalid environment settings: {exc}") from exc

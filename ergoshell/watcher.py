"""Watch mode: regenerate whenever the config changes.

The config path (file, bundle, or directory) is polled for changes by comparing
``(mtime_ns, size)`` snapshots.  Each content modification re-resolves the
config; if the resolved text actually differs from the one last generated, the
orchestrator runs again.

Events are handled one at a time.  The change source is not polled while a
regeneration is in flight, so edits made during a run are picked up by the
next poll instead of starting an overlapping run.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import Config
from .engine import Engine, InjectionRegistry
from .errors import ResolutionError
from .models import GenerationOutcome
from .orchestrator import generate
from .resolver import read_config
from .utils import print_info, print_warning

Snapshot = dict[str, tuple[int, int]]


class ChangeKind(str, Enum):
    """What happened to the watched path between two polls."""
    MODIFIED = "modified"
    CREATED = "created"
    DELETED = "deleted"


class WatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    path: Path


# ---------------------------------------------------------------------------
# Change detection
# ---------------------------------------------------------------------------


def snapshot(path: str | Path) -> Snapshot | None:
    """Return ``{relative_path: (mtime_ns, size)}`` for *path*, or ``None`` if missing.

    A plain file is keyed by ``""``; a directory by every file below it.
    """
    root = Path(path)
    try:
        st = root.stat()
    except FileNotFoundError:
        return None
    if not root.is_dir():
        return {"": (st.st_mtime_ns, st.st_size)}

    snap: Snapshot = {}
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            full = Path(dirpath) / filename
            try:
                fst = full.stat()
            except FileNotFoundError:
                continue
            snap[full.relative_to(root).as_posix()] = (fst.st_mtime_ns, fst.st_size)
    return snap


def diff_snapshots(previous: Snapshot | None, current: Snapshot | None) -> ChangeKind | None:
    if previous == current:
        return None
    if previous is None:
        return ChangeKind.CREATED
    if current is None:
        return ChangeKind.DELETED
    return ChangeKind.MODIFIED


class PollingChangeSource:
    """Async iterable of :class:`ChangeEvent` for one path, driven by polling."""

    def __init__(self, path: str | Path, interval: float = 0.5) -> None:
        self.path = Path(path)
        self.interval = interval

    async def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        previous = await asyncio.to_thread(snapshot, self.path)
        while True:
            await asyncio.sleep(self.interval)
            current = await asyncio.to_thread(snapshot, self.path)
            kind = diff_snapshots(previous, current)
            previous = current
            if kind is not None:
                yield ChangeEvent(kind=kind, path=self.path)


# ---------------------------------------------------------------------------
# Watch loop
# ---------------------------------------------------------------------------


class WatchLoop:
    """Idle/running state machine around the resolver and the orchestrator.

    Attributes:
        config_text: The config text last handed to the orchestrator.
        registry: Injections resolved together with ``config_text``.
        state: ``RUNNING`` while the orchestrator is in flight, else ``IDLE``.
    """

    def __init__(
        self,
        config_path: str | Path,
        config: Config,
        engine: Engine,
        config_text: str,
        registry: InjectionRegistry,
    ) -> None:
        self.config_path = Path(config_path)
        self.config = config
        self.engine = engine
        self.config_text = config_text
        self.registry = registry
        self.state = WatchState.IDLE

    async def _regenerate(self) -> GenerationOutcome:
        self.state = WatchState.RUNNING
        try:
            return await generate(self.config_text, self.registry, self.config, self.engine)
        finally:
            self.state = WatchState.IDLE

    async def start(self) -> GenerationOutcome:
        """Run the initial generation."""
        return await self._regenerate()

    async def handle(self, event: ChangeEvent) -> GenerationOutcome | None:
        """React to one change event.

        Returns:
            The outcome of the regeneration, or ``None`` if the event was
            ignored (not a modification, unreadable config, or same text).
        """
        if event.kind is not ChangeKind.MODIFIED:
            return None

        registry = InjectionRegistry()
        try:
            bundle = await read_config(self.config_path, registry)
        except ResolutionError as exc:
            print_warning(f"{exc} -- waiting for the next change.")
            return None

        if bundle.config_text == self.config_text:
            return None

        self.config_text = bundle.config_text
        self.registry = registry
        print_info(f'"{self.config_path}" changed, regenerating...')
        return await self._regenerate()

    async def run(self, source: AsyncIterable[ChangeEvent] | None = None) -> None:
        """Generate once, then regenerate on every relevant change.

        With the default polling source this never returns; the process is
        expected to be stopped externally.
        """
        if source is None:
            source = PollingChangeSource(self.config_path, self.config.watch_settings.interval)
        print_info(f'Watching "{self.config_path}" for changes... (Ctrl+C to stop)')
        await self.start()
        async for event in source:
            await self.handle(event)

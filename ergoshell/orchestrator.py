"""Generation orchestrator.

Runs the engine on a config and writes its results to disk.  Failures in either
step are printed and reported in the returned :class:`GenerationOutcome`
instead of being raised, so a watch session keeps running after a bad edit.
"""

from __future__ import annotations

import time

from .config import Config
from .engine import Engine, InjectionRegistry
from .models import GenerationOutcome, GenerationStage
from .output import generate_output
from .utils import console, format_duration, print_exception, print_info, print_success


async def generate(
    config_text: str,
    registry: InjectionRegistry,
    config: Config,
    engine: Engine,
) -> GenerationOutcome:
    """Process *config_text* and materialise the results under ``config.output_dir``.

    Always prints ``Done.`` when finished, whether or not the run succeeded.
    """
    start = time.monotonic()
    stage = GenerationStage.PROCESS
    outcome = GenerationOutcome()
    try:
        results = await engine.process(config_text, config.debug, print_info, registry)
        stage = GenerationStage.OUTPUT
        written = await generate_output(results, config.output_dir, config.clean)
        outcome.files_written = [str(path) for path in written]
    except Exception as exc:  # noqa: BLE001
        print_exception(exc)
        outcome.success = False
        outcome.stage = stage
        outcome.error = str(exc) or type(exc).__name__

    outcome.duration_seconds = time.monotonic() - start
    if config.debug:
        print_success(f"Finished in {format_duration(outcome.duration_seconds)}")
    print_info("Done.")
    console.print()
    return outcome

"""Unit tests for the generation orchestrator (ergoshell.orchestrator).

Tests cover:
- Successful run (engine called, files written, outcome populated)
- Engine failures reported in the outcome, not raised
- Materialization failures reported in the outcome, not raised
- "Done." printed unconditionally
- Debug flag and engine log forwarding
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ergoshell.config import Config
from ergoshell.engine import InjectionRegistry
from ergoshell.errors import EngineError, GenerationError
from ergoshell.models import GenerationStage
from ergoshell.orchestrator import generate


class TestGenerateSuccess:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_writes_results(self, fake_engine, run_config: Config):
        outcome = await generate("points: {}", InjectionRegistry(), run_config, fake_engine)

        assert outcome.success is True
        assert outcome.stage is None
        assert outcome.error is None
        assert len(outcome.files_written) == 13
        assert (run_config.output_dir / "pcbs" / "main.kicad_pcb").exists()
        assert fake_engine.calls[0][0] == "points: {}"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_registry_passed_to_engine(self, fake_engine, run_config: Config):
        registry = InjectionRegistry()
        registry.inject("footprint", "custom", "module.exports = {}")
        await generate("points: {}", registry, run_config, fake_engine)
        _, _, injections = fake_engine.calls[0]
        assert [(i.type, i.name) for i in injections] == [("footprint", "custom")]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_debug_forwarded(self, fake_engine, tmp_path: Path):
        config = Config(output_dir=tmp_path / "out", debug=True)
        await generate("points: {}", InjectionRegistry(), config, fake_engine)
        assert fake_engine.calls[0][1] is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_engine_logs_printed(self, engine_factory, full_results, run_config, capsys):
        engine = engine_factory(full_results, logs=["Interpreting units...", "Parsing points..."])
        await generate("points: {}", InjectionRegistry(), run_config, engine)
        out = capsys.readouterr().out
        assert "Interpreting units..." in out
        assert "Parsing points..." in out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_prints_done(self, fake_engine, run_config: Config, capsys):
        await generate("points: {}", InjectionRegistry(), run_config, fake_engine)
        assert "Done." in capsys.readouterr().out


class TestGenerateFailureIsolation:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_engine_error_caught(self, fake_engine, run_config: Config, capsys):
        fake_engine.error = EngineError("Unexpected key 'pointz'")
        outcome = await generate("pointz: {}", InjectionRegistry(), run_config, fake_engine)

        assert outcome.success is False
        assert outcome.stage == GenerationStage.PROCESS
        assert "pointz" in outcome.error
        assert outcome.files_written == []
        out = capsys.readouterr().out
        assert "EngineError" in out
        assert "Done." in out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_arbitrary_exception_caught(self, fake_engine, run_config: Config):
        fake_engine.error = RuntimeError("boom")
        outcome = await generate("x", InjectionRegistry(), run_config, fake_engine)
        assert outcome.success is False
        assert outcome.error == "boom"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nothing_written_on_engine_failure(self, fake_engine, run_config: Config):
        fake_engine.error = GenerationError("bad config")
        await generate("x", InjectionRegistry(), run_config, fake_engine)
        assert not run_config.output_dir.exists()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_materialization_error_caught(self, fake_engine, tmp_path: Path, capsys):
        blocker = tmp_path / "output"
        blocker.write_text("a file where the output folder should be")
        config = Config(output_dir=blocker)

        outcome = await generate("points: {}", InjectionRegistry(), config, fake_engine)

        assert outcome.success is False
        assert outcome.stage == GenerationStage.OUTPUT
        assert "MaterializationError" in capsys.readouterr().out

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_duration_recorded(self, fake_engine, run_config: Config):
        outcome = await generate("x", InjectionRegistry(), run_config, fake_engine)
        assert outcome.duration_seconds >= 0.0

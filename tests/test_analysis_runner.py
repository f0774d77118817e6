"""Tests for the analysis runner and its progress reporting."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from cadence.api.schemas.websocket import AnalysisStage
from cadence.audio_analyzer.decoder import AudioDecodeError
from cadence.pipeline.analysis_runner import (
    AnalysisRunner,
    discard_analysis_runner,
    get_analysis_runner,
)
from cadence.pipeline.config import DEFAULT_ANALYSIS_WORKERS, get_analysis_worker_count
from cadence.pipeline.progress_reporter import ProgressReporter, connection_manager
from tests.signals import tone, wav_bytes


class RecordingSocket:
    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def send_json(self, data: dict) -> None:
        self.messages.append(data)


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=2)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def socket():
    ws = RecordingSocket()
    connection_manager.active_connections["p1"] = [ws]
    yield ws
    connection_manager.active_connections.pop("p1", None)


@pytest.fixture
def audio() -> bytes:
    return wav_bytes(tone(440.0, 0.5, 20))


def test_run_returns_analysis_and_reports_stages(executor, socket, audio):
    runner = AnalysisRunner("p1", executor=executor)

    result = asyncio.run(runner.run(audio))

    assert result is not None
    assert result.duration_seconds == pytest.approx(2.0)
    assert [m["stage"] for m in socket.messages] == [
        AnalysisStage.DECODING,
        AnalysisStage.ANALYZING,
        AnalysisStage.COMPLETED,
    ]
    assert all(m["generation"] == 1 for m in socket.messages)


def test_newer_run_supersedes_older(executor, audio):
    runner = AnalysisRunner("p1", executor=executor)

    async def both():
        return await asyncio.gather(runner.run(audio), runner.run(audio))

    older, newer = asyncio.run(both())

    assert older is None
    assert newer is not None
    assert runner.generation == 2


def test_cancel_drops_in_flight_result(executor, audio):
    runner = AnalysisRunner("p1", executor=executor)

    async def run_and_cancel():
        task = asyncio.create_task(runner.run(audio))
        await asyncio.sleep(0)
        runner.cancel()
        return await task

    assert asyncio.run(run_and_cancel()) is None


def test_decode_failure_of_current_run_raises(executor, socket):
    runner = AnalysisRunner("p1", executor=executor)

    with pytest.raises(AudioDecodeError):
        asyncio.run(runner.run(b"not audio"))

    assert socket.messages[-1]["stage"] == AnalysisStage.FAILED


def test_decode_failure_of_superseded_run_is_dropped(executor, audio):
    runner = AnalysisRunner("p1", executor=executor)

    async def both():
        return await asyncio.gather(runner.run(b"not audio"), runner.run(audio))

    older, newer = asyncio.run(both())

    assert older is None
    assert newer is not None


def test_runner_registry():
    runner = get_analysis_runner("registry-test")
    assert get_analysis_runner("registry-test") is runner

    discard_analysis_runner("registry-test")

    assert runner.generation == 1
    assert get_analysis_runner("registry-test") is not runner
    discard_analysis_runner("registry-test")


class TestWorkerConfig:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("CADENCE_ANALYSIS_WORKERS", raising=False)
        assert get_analysis_worker_count() == DEFAULT_ANALYSIS_WORKERS

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CADENCE_ANALYSIS_WORKERS", "4")
        assert get_analysis_worker_count() == 4

    @pytest.mark.parametrize("value", ["zero", "0", "-2"])
    def test_invalid_values(self, monkeypatch, value):
        monkeypatch.setenv("CADENCE_ANALYSIS_WORKERS", value)
        with pytest.raises(ValueError):
            get_analysis_worker_count()


class DeadSocket:
    async def send_json(self, data: dict) -> None:
        raise RuntimeError("socket closed")


def test_broadcast_drops_dead_clients():
    alive, dead = RecordingSocket(), DeadSocket()
    connection_manager.active_connections["p-dead"] = [alive, dead]

    asyncio.run(ProgressReporter("p-dead").send_progress(AnalysisStage.DECODING, 10.0))

    assert len(alive.messages) == 1
    assert connection_manager.active_connections.pop("p-dead") == [alive]

"""Analysis runner: decodes and analyzes uploads off the event loop."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import cache

from cadence.api.schemas.websocket import AnalysisStage
from cadence.audio_analyzer.analyzer import analyze_audio
from cadence.audio_analyzer.config import DEFAULT_ANALYZER_CONFIG, AnalyzerConfig
from cadence.audio_analyzer.decoder import decode_audio
from cadence.audio_analyzer.schemas import AudioAnalysisResult
from cadence.pipeline.config import get_analysis_worker_count
from cadence.pipeline.progress_reporter import ProgressReporter

logger = logging.getLogger(__name__)


@cache
def analysis_executor() -> ThreadPoolExecutor:
    """Provide the shared thread pool for CPU-bound analysis."""
    return ThreadPoolExecutor(
        max_workers=get_analysis_worker_count(),
        thread_name_prefix="cadence-analysis",
    )


class AnalysisRunner:
    """Runs analyses for one project, newest request wins.

    Every ``run`` or ``cancel`` bumps a generation counter. A run whose
    generation is no longer current when its work finishes returns None
    instead of a result, so stale analyses never overwrite newer state.
    """

    def __init__(
        self,
        project_id: str,
        config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize the analysis runner.

        Args:
            project_id: The project ID for tracking.
            config: Analysis constants.
            executor: Thread pool to run on; defaults to the shared pool.
        """
        self.project_id = project_id
        self.config = config
        self.reporter = ProgressReporter(project_id)
        self.executor = executor or analysis_executor()
        self._generation = 0

    @property
    def generation(self) -> int:
        """Return the current generation."""
        return self._generation

    def is_current(self, generation: int) -> bool:
        """Return True if ``generation`` has not been superseded."""
        return generation == self._generation

    def cancel(self) -> None:
        """Supersede any in-flight run."""
        self._generation += 1
        logger.info("[project=%s] Analysis cancelled (gen=%d)", self.project_id, self._generation)

    async def run(self, data: bytes) -> AudioAnalysisResult | None:
        """Decode and analyze an encoded audio buffer.

        Args:
            data: Encoded audio bytes.

        Returns:
            The analysis result, or None if this run was superseded.

        Raises:
            AudioDecodeError: If the current run cannot decode the input.
        """
        self._generation += 1
        generation = self._generation
        loop = asyncio.get_running_loop()
        logger.info(
            "[project=%s] Starting analysis gen=%d (%d bytes)",
            self.project_id,
            generation,
            len(data),
        )

        try:
            await self.reporter.send_progress(
                stage=AnalysisStage.DECODING,
                progress_percent=0,
                generation=generation,
                message="Decoding audio...",
            )
            samples, sample_rate = await loop.run_in_executor(self.executor, decode_audio, data)
            if not self.is_current(generation):
                return await self._superseded(generation)

            await self.reporter.send_progress(
                stage=AnalysisStage.ANALYZING,
                progress_percent=40,
                generation=generation,
                message="Measuring energy and peaks...",
            )
            result = await loop.run_in_executor(
                self.executor, analyze_audio, samples, sample_rate, self.config
            )
        except Exception as e:
            if not self.is_current(generation):
                logger.info(
                    "[project=%s] Superseded analysis gen=%d failed: %s",
                    self.project_id,
                    generation,
                    e,
                )
                return None
            logger.exception("[project=%s] Analysis gen=%d failed", self.project_id, generation)
            await self.reporter.send_error(f"{type(e).__name__}: {e}", generation=generation)
            raise

        if not self.is_current(generation):
            return await self._superseded(generation)

        await self.reporter.send_complete(generation=generation)
        logger.info(
            "[project=%s] Analysis gen=%d complete: %.2fs, %d segments",
            self.project_id,
            generation,
            result.duration_seconds,
            len(result.segments),
        )
        return result

    async def _superseded(self, generation: int) -> None:
        logger.info(
            "[project=%s] Dropping analysis gen=%d (current gen=%d)",
            self.project_id,
            generation,
            self._generation,
        )
        await self.reporter.send_cancelled(generation=generation)


_runners: dict[str, AnalysisRunner] = {}


def get_analysis_runner(project_id: str) -> AnalysisRunner:
    """Get the runner for a project, creating it on first use."""
    if project_id not in _runners:
        _runners[project_id] = AnalysisRunner(project_id)
    return _runners[project_id]


def discard_analysis_runner(project_id: str) -> None:
    """Cancel and forget a project's runner."""
    runner = _runners.pop(project_id, None)
    if runner is not None:
        runner.cancel()

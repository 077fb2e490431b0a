"""Pipeline orchestration for Voiceover.

Responsibilities:
- Define the stage order for long-form narration: chunk, tts, assemble.
- Expose the two caller entry points returning finished WAV bytes.

Key types:
- `NarrationPipeline`: orchestration facade over one speech provider.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from ..audio.wav import AudioAssembler
from ..config import PipelineConfig
from ..errors import NarrationError
from ..models.datatypes import SynthesisOutcome, TextChunk
from ..telemetry.logger import RunLogger
from ..text.chunking import Chunker
from ..tts.retry import RetryingInvoker
from ..tts.synthesizer import ChunkSynthesizer, SpeechProvider
from .scheduler import BatchScheduler, ProgressFn

SAMPLE_PHRASE = "Hello, this is a sample of my voice for you to evaluate."


class NarrationPipeline:
    """Coordinate chunking, batched synthesis, and WAV assembly for one provider."""

    def __init__(
        self,
        provider: SpeechProvider,
        config: PipelineConfig | None = None,
        run_logger: RunLogger | None = None,
        sleep: Callable[[float], Awaitable[object]] | None = None,
    ) -> None:
        """Initialize pipeline collaborators from explicit configuration."""

        self.config = config or PipelineConfig()
        self.config.validate()
        self._run_logger = run_logger

        # Thread-backed providers bound each request themselves; waiting on
        # them must not be cut short while their request is still in flight.
        attempt_timeout = (
            None
            if getattr(provider, "bounds_own_timeout", False)
            else self.config.request_timeout_seconds
        )
        invoker = RetryingInvoker(
            self.config.max_retries,
            self.config.initial_delay_ms,
            timeout_seconds=attempt_timeout,
            sleep=sleep or asyncio.sleep,
        )
        self.chunker = Chunker()
        self.synthesizer = ChunkSynthesizer(
            provider,
            invoker,
            default_sample_rate=self.config.default_sample_rate,
        )
        self.scheduler = BatchScheduler(self.config.batch_size)
        self.assembler = AudioAssembler()

    async def synthesize_long_form(
        self,
        text: str,
        voice_id: str,
        language_code: str,
        on_progress: ProgressFn | None = None,
    ) -> bytes:
        """Narrate an arbitrarily long script into one WAV file.

        Raises:
            ValueError: If the script has no narratable text.
            NarrationError: On any classified synthesis or assembly failure.
        """

        report = on_progress or (lambda _message: None)

        self._log_start("chunk")
        chunks = self.chunker.chunk(text, self.config.char_limit)
        if not chunks:
            raise ValueError("Script text is empty; nothing to narrate.")
        self._log_complete("chunk", chunks=len(chunks))

        async def _synthesize(chunk: TextChunk) -> SynthesisOutcome:
            return await self.synthesizer.synthesize(chunk, voice_id, language_code)

        self._log_start("tts", chunks=len(chunks), batch_size=self.config.batch_size)
        try:
            outcomes = await self.scheduler.run(chunks, _synthesize, report)
        except NarrationError as exc:
            self._log_failure("tts", exc.kind)
            raise
        self._log_complete("tts")

        if len(chunks) > 1:
            report("Merging audio parts...")
        return self._assemble(outcomes)

    async def synthesize_sample(self, voice_id: str, language_code: str) -> bytes:
        """Narrate the fixed demonstration phrase, bypassing chunking and batching."""

        outcome = await self.synthesizer.synthesize(
            TextChunk(index=0, text=SAMPLE_PHRASE), voice_id, language_code
        )
        return self._assemble([outcome])

    def _assemble(self, outcomes: list[SynthesisOutcome]) -> bytes:
        """Run the assemble stage with phase logging."""

        self._log_start("assemble")
        try:
            wav_bytes = self.assembler.assemble(outcomes)
        except NarrationError as exc:
            self._log_failure("assemble", exc.kind)
            raise
        self._log_complete("assemble", bytes=len(wav_bytes))
        return wav_bytes

    def _log_start(self, stage: str, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage, **context)

    def _log_complete(self, stage: str, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage, **context)

    def _log_failure(self, stage: str, error_type: str) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_failure(stage, error_type)

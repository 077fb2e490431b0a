"""Unit tests for deterministic phase log lines."""

from __future__ import annotations

import io

from voiceover.telemetry.logger import RunLogger


def test_run_logger_emits_sorted_sanitized_context() -> None:
    sink = io.StringIO()
    run_logger = RunLogger(sink=sink)

    run_logger.log_stage_start("tts", voice="Kore", chunks=3, language="pt BR")
    run_logger.log_stage_complete("assemble", bytes=1044)
    run_logger.log_stage_failure("tts", error_type="BatchFailureError")

    assert sink.getvalue().splitlines() == [
        "[phase] level=INFO stage=tts event=start chunks=3 language=pt_BR voice=Kore",
        "[phase] level=INFO stage=assemble event=complete bytes=1044",
        "[phase] level=ERROR stage=tts event=failure error_type=BatchFailureError",
    ]


def test_run_logger_respects_level_threshold() -> None:
    """Lines below the configured level are dropped."""

    sink = io.StringIO()
    run_logger = RunLogger(sink=sink, level="ERROR")

    run_logger.log_stage_start("chunk")
    run_logger.log_stage_failure("chunk", error_type="ValueError")

    assert sink.getvalue().splitlines() == [
        "[phase] level=ERROR stage=chunk event=failure error_type=ValueError",
    ]

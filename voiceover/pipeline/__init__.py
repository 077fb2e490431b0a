"""Voiceover pipeline package.

This package contains the narration orchestration facade and the batch
scheduler it drives.
"""

from .orchestrator import SAMPLE_PHRASE, NarrationPipeline
from .scheduler import BatchScheduler

__all__ = ["BatchScheduler", "NarrationPipeline", "SAMPLE_PHRASE"]

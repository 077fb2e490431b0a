"""Top-level package for Voiceover.

This package turns long narration scripts into a single WAV voice-over by
calling a per-request-limited speech API in bounded concurrent batches. The
main orchestration entry point is `NarrationPipeline`.
"""

from .pipeline import NarrationPipeline

__all__ = ["NarrationPipeline", "__version__"]

__version__ = "0.1.0"

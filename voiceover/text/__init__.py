"""Text segmentation components.

This package provides deterministic sentence-bounded chunking used before the
TTS stage.
"""

from .chunking import Chunker, chunk_text

__all__ = ["Chunker", "chunk_text"]

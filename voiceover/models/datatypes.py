"""Core datatypes shared across Voiceover modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Keep chunk ordering explicit through dense 0-based indices.

Key types:
- `TextChunk`, `SpeechPayload`, `SynthesisOutcome`, and `AssembledAudio`.
"""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class TextChunk:
    """A bounded slice of the narration script.

    Attributes:
        index: 0-based dense position in the chunk sequence.
        text: Chunk content, non-empty after trimming.
    """

    index: int
    text: str


@dataclass(frozen=True, slots=True)
class SpeechPayload:
    """Encoded audio returned by a speech provider for one request.

    Attributes:
        audio: Raw encoded audio bytes (16-bit little-endian PCM for Gemini).
        mime_type: Format descriptor, e.g. `audio/L16;codec=pcm;rate=24000`.
    """

    audio: bytes
    mime_type: str


@dataclass(frozen=True, slots=True)
class SynthesisOutcome:
    """Decoded synthesis result for one chunk.

    Attributes:
        index: Same ordinal as the source chunk.
        samples: 16-bit signed mono samples, possibly empty.
        sample_rate: Sample rate in Hz, or `None` when nothing was produced.
    """

    index: int
    samples: array = field(default_factory=lambda: array("h"))
    sample_rate: int | None = None

    @property
    def is_empty(self) -> bool:
        """Return whether this outcome carries no samples."""

        return len(self.samples) == 0


@dataclass(frozen=True, slots=True)
class AssembledAudio:
    """Ordered concatenation of all outcome samples at one canonical rate."""

    samples: array
    sample_rate: int

    @property
    def duration_seconds(self) -> float:
        """Return audio duration in seconds."""

        return len(self.samples) / float(self.sample_rate)

"""PCM decoding and WAV assembly for narration output.

Responsibilities:
- Decode little-endian 16-bit PCM payloads into sample arrays.
- Concatenate chunk outcomes in index order at one canonical sample rate.
- Encode mono 16-bit PCM into a canonical 44-byte-header WAV container.
"""

from __future__ import annotations

from array import array
from collections.abc import Iterable
import io
import sys
import wave

from ..errors import AllContentFilteredError
from ..models.datatypes import AssembledAudio, SynthesisOutcome

WAV_HEADER_SIZE = 44
_SAMPLE_WIDTH_BYTES = 2
_CHANNELS = 1


def decode_pcm16(data: bytes) -> array:
    """Decode little-endian signed 16-bit PCM bytes; a trailing odd byte is dropped."""

    usable = len(data) - (len(data) % _SAMPLE_WIDTH_BYTES)
    samples = array("h")
    samples.frombytes(data[:usable])
    if sys.byteorder == "big":
        samples.byteswap()
    return samples


def _pcm16_bytes(samples: array) -> bytes:
    """Serialize a sample array as little-endian bytes."""

    if sys.byteorder == "big":
        swapped = array("h", samples)
        swapped.byteswap()
        return swapped.tobytes()
    return samples.tobytes()


def encode_wav(samples: array, sample_rate: int) -> bytes:
    """Encode mono 16-bit samples into WAV bytes.

    The standard-library writer emits the canonical header: RIFF size of
    36 + data size, a 16-byte PCM `fmt ` chunk, block align 2, byte rate
    `sample_rate * 2`, and a `data` chunk of `len(samples) * 2` bytes.
    """

    if sample_rate <= 0:
        raise ValueError("`sample_rate` must be a positive integer.")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(_CHANNELS)
        wav_file.setsampwidth(_SAMPLE_WIDTH_BYTES)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(_pcm16_bytes(samples))
    return buffer.getvalue()


class AudioAssembler:
    """Merge synthesis outcomes into one deterministic WAV output."""

    def combine(self, outcomes: Iterable[SynthesisOutcome]) -> AssembledAudio:
        """Concatenate outcome samples in ascending index order.

        Raises:
            AllContentFilteredError: If no outcome carries any samples.
        """

        ordered = sorted(outcomes, key=lambda outcome: outcome.index)
        sample_rate = next(
            (
                outcome.sample_rate
                for outcome in ordered
                if not outcome.is_empty and outcome.sample_rate
            ),
            None,
        )
        if sample_rate is None:
            raise AllContentFilteredError(
                "No audio could be generated for any part of the text; it may have "
                "been fully blocked by content filters.",
                hint="Review the script text and try again.",
            )

        combined = array("h")
        for outcome in ordered:
            combined.extend(outcome.samples)
        return AssembledAudio(samples=combined, sample_rate=sample_rate)

    def assemble(self, outcomes: Iterable[SynthesisOutcome]) -> bytes:
        """Return WAV bytes for the ordered concatenation of all outcomes."""

        audio = self.combine(outcomes)
        return encode_wav(audio.samples, audio.sample_rate)

"""Audio decoding and assembly components.

This package turns decoded chunk samples into the final WAV deliverable.
"""

from .wav import AudioAssembler, decode_pcm16, encode_wav

__all__ = ["AudioAssembler", "decode_pcm16", "encode_wav"]

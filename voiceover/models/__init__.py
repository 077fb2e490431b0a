"""Shared typed data models for Voiceover.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import AssembledAudio, SpeechPayload, SynthesisOutcome, TextChunk

__all__ = [
    "AssembledAudio",
    "SpeechPayload",
    "SynthesisOutcome",
    "TextChunk",
]

"""Text-to-speech provider abstractions.

This package contains the voice catalog, the retry policy, and the chunk
synthesizer used by the pipeline TTS stage.
"""

from .retry import RetryingInvoker, classify_failure
from .synthesizer import ChunkSynthesizer, GeminiSpeechProvider, SpeechProvider
from .voices import AVAILABLE_VOICES, LANGUAGES, VoiceProfile

__all__ = [
    "AVAILABLE_VOICES",
    "LANGUAGES",
    "ChunkSynthesizer",
    "GeminiSpeechProvider",
    "RetryingInvoker",
    "SpeechProvider",
    "VoiceProfile",
    "classify_failure",
]

"""Speech provider HTTP clients.

This package contains the concrete provider glue the narration pipeline calls
through the `SpeechProvider` protocol.
"""

from .gemini_client import GeminiProviderError, GeminiSpeechClient

__all__ = ["GeminiProviderError", "GeminiSpeechClient"]

"""Voice profile models and the prebuilt voice catalog.

Responsibilities:
- Represent provider voice identities and tuning metadata.
- List the prebuilt voices and narration languages the TTS model accepts.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Declarative voice profile used by TTS providers.

    Attributes:
        name: Human-readable profile name.
        provider_voice_id: Provider-native voice identifier.
        gender: Perceived voice gender label.
    """

    name: str
    provider_voice_id: str
    gender: str


@dataclass(frozen=True, slots=True)
class NarrationLanguage:
    """Language offered for narration."""

    code: str
    name: str


_FEMALE_VOICES = (
    "Zephyr",
    "Kore",
    "Leda",
    "Aoede",
    "Callirrhoe",
    "Autonoe",
    "Algieba",
    "Despina",
    "Erinome",
    "Laomedeia",
    "Achernar",
    "Pulcherrima",
    "Achird",
    "Vindemiatrix",
    "Sulafat",
)
_MALE_VOICES = (
    "Puck",
    "Charon",
    "Fenrir",
    "Orus",
    "Enceladus",
    "Iapetus",
    "Umbriel",
    "Algenib",
    "Rasalgethi",
    "Alnilam",
    "Schedar",
    "Gacrux",
    "Zubenelgenubi",
    "Sadachbia",
    "Sadaltager",
)

AVAILABLE_VOICES: tuple[VoiceProfile, ...] = tuple(
    [VoiceProfile(name=voice, provider_voice_id=voice, gender="female") for voice in _FEMALE_VOICES]
    + [VoiceProfile(name=voice, provider_voice_id=voice, gender="male") for voice in _MALE_VOICES]
)

LANGUAGES: tuple[NarrationLanguage, ...] = tuple(
    sorted(
        (
            NarrationLanguage("de-DE", "German (Germany)"),
            NarrationLanguage("ar-XA", "Arabic (Standard)"),
            NarrationLanguage("zh-CN", "Chinese (Mandarin, Simplified)"),
            NarrationLanguage("ko-KR", "Korean (South Korea)"),
            NarrationLanguage("hr-HR", "Croatian (Croatia)"),
            NarrationLanguage("da-DK", "Danish (Denmark)"),
            NarrationLanguage("es-ES", "Spanish (Spain)"),
            NarrationLanguage("fi-FI", "Finnish (Finland)"),
            NarrationLanguage("fr-FR", "French (France)"),
            NarrationLanguage("el-GR", "Greek (Greece)"),
            NarrationLanguage("hi-IN", "Hindi (India)"),
            NarrationLanguage("nl-NL", "Dutch (Netherlands)"),
            NarrationLanguage("hu-HU", "Hungarian (Hungary)"),
            NarrationLanguage("id-ID", "Indonesian (Indonesia)"),
            NarrationLanguage("en-US", "English (US)"),
            NarrationLanguage("it-IT", "Italian (Italy)"),
            NarrationLanguage("ja-JP", "Japanese (Japan)"),
            NarrationLanguage("ms-MY", "Malay (Malaysia)"),
            NarrationLanguage("no-NO", "Norwegian (Norway)"),
            NarrationLanguage("pl-PL", "Polish (Poland)"),
            NarrationLanguage("pt-BR", "Portuguese (Brazil)"),
            NarrationLanguage("pt-PT", "Portuguese (Portugal)"),
            NarrationLanguage("ro-RO", "Romanian (Romania)"),
            NarrationLanguage("ru-RU", "Russian (Russia)"),
            NarrationLanguage("sv-SE", "Swedish (Sweden)"),
            NarrationLanguage("th-TH", "Thai (Thailand)"),
            NarrationLanguage("cs-CZ", "Czech (Czech Republic)"),
            NarrationLanguage("tr-TR", "Turkish (Turkey)"),
            NarrationLanguage("uk-UA", "Ukrainian (Ukraine)"),
            NarrationLanguage("vi-VN", "Vietnamese (Vietnam)"),
        ),
        key=lambda language: language.name,
    )
)


def find_voice(voice_id: str) -> VoiceProfile | None:
    """Return the catalog voice matching `voice_id` case-insensitively."""

    lowered = voice_id.strip().lower()
    for voice in AVAILABLE_VOICES:
        if voice.provider_voice_id.lower() == lowered:
            return voice
    return None


def is_supported_language(code: str) -> bool:
    """Return whether `code` is one of the catalog language codes."""

    return any(language.code == code.strip() for language in LANGUAGES)

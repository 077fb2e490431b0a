"""Script-to-chunk segmentation logic.

Responsibilities:
- Split narration scripts into sentence-complete chunks bounded for provider calls.
- Preserve dense index metadata required for deterministic reassembly.
"""

from __future__ import annotations

import re

from ..models.datatypes import TextChunk


class Chunker:
    """Pack whole sentences into bounded chunks, never truncating a sentence."""

    _SENTENCE_PATTERN = re.compile(r"[^.!?]*[.!?]+|[^.!?]+")

    def chunk(self, text: str, limit: int) -> list[TextChunk]:
        """Split script text into ordered chunk records.

        Args:
            text: Narration script of any length.
            limit: Maximum chunk length in characters.

        Returns:
            Chunks with dense 0-based indices. A single sentence longer than
            `limit` is emitted verbatim as its own chunk.
        """

        if limit <= 0:
            raise ValueError("Chunk `limit` must be a positive integer.")
        if not text or not text.strip():
            return []

        contents: list[str] = []
        current = ""
        for sentence in self.split_sentences(text):
            if len(sentence) > limit:
                if current:
                    contents.append(current)
                    current = ""
                contents.append(sentence)
                continue

            if current and len(current) + 1 + len(sentence) > limit:
                contents.append(current)
                current = ""

            current = f"{current} {sentence}" if current else sentence

        if current:
            contents.append(current)

        return [TextChunk(index=index, text=content) for index, content in enumerate(contents)]

    def split_sentences(self, text: str) -> list[str]:
        """Return trimmed sentence units ending in `.`, `!` or `?` where present."""

        units = (match.group(0).strip() for match in self._SENTENCE_PATTERN.finditer(text))
        return [unit for unit in units if unit]


def chunk_text(text: str, limit: int) -> list[TextChunk]:
    """Split script text with a default `Chunker` instance."""

    return Chunker().chunk(text, limit)

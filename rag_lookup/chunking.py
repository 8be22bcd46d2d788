"""
Text Chunking Module

WHY CHUNKING IS NECESSARY:
1. Embedding models have input limits and work best on focused text
2. Retrieval is more precise with smaller, specific fragments
3. Only the best few fragments are sent to the LLM, so each must stand alone

THE STRATEGY WE USE (Greedy Word Packing):
- Split the text into words on any run of whitespace
- Pack words into a fragment, joined by single spaces, until the next
  word would push it past max_len
- Then close the fragment and start a new one with that word

WHY WORDS AND NOT CHARACTERS:
Fixed-size character slicing cuts words in half ("retr" | "ieval"), and a
half word embeds as noise. Packing whole words keeps every fragment readable.

EDGE CASES:
- A single word longer than max_len becomes its own oversized fragment.
  We never split a word.
- max_len <= 0 means "one word per fragment".
- Empty or whitespace-only text produces no fragments.

GUARANTEE:
" ".join(chunk_text(text, n)) == " ".join(text.split())
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Chunk:
    """
    A fragment of a document, plus where it came from.

    WHY TRACK METADATA:
    - source: Know which document this came from (for citations)
    - chunk_index: Order within document
    - total_chunks: Context for how much of document this represents
    """
    text: str
    source: str
    chunk_index: int
    total_chunks: Optional[int] = None

    def __repr__(self):
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"Chunk({self.source}, idx={self.chunk_index}, text='{preview}')"


def chunk_text(text: str, max_len: int) -> List[str]:
    """
    Split text into fragments of at most max_len characters.

    Args:
        text: Raw text (any mix of spaces, tabs and newlines)
        max_len: Target maximum fragment length in characters

    Returns:
        Ordered list of fragments. Words are never split, dropped or
        reordered.

    Example:
        >>> chunk_text("this is a test of chunking functionality", 10)
        ['this is a', 'test of', 'chunking', 'functionality']
    """
    words = text.split()

    if max_len <= 0:
        return words

    chunks = []
    buf: List[str] = []
    buf_len = 0

    for word in words:
        # Length of " ".join(buf + [word])
        joined_len = buf_len + len(word) + (1 if buf else 0)

        if joined_len > max_len and buf:
            chunks.append(" ".join(buf))
            buf = [word]
            buf_len = len(word)
        else:
            buf.append(word)
            buf_len = joined_len

    if buf:
        chunks.append(" ".join(buf))

    return chunks


class WordChunker:
    """
    Split documents into word-aligned fragments.

    WHY A CLASS:
    - Holds the configured max_len so the pipeline can pass one object around
    - Wraps each fragment in a Chunk with source bookkeeping
    """

    def __init__(self, max_len: int = 300):
        """
        Initialize the chunker.

        Args:
            max_len: Target maximum fragment size in characters
        """
        self.max_len = max_len

    def chunk(self, text: str) -> List[str]:
        """Split text into plain string fragments."""
        return chunk_text(text, self.max_len)

    def chunk_document(self, text: str, source: str = "unknown") -> List[Chunk]:
        """
        Split text into Chunk records.

        Args:
            text: The full document text
            source: Source identifier (filename, URL, etc.)

        Returns:
            List of Chunk objects, in document order
        """
        pieces = self.chunk(text)
        chunks = [
            Chunk(
                text=piece,
                source=source,
                chunk_index=i,
                total_chunks=len(pieces)
            )
            for i, piece in enumerate(pieces)
        ]

        logger.debug(f"Created {len(chunks)} chunks from {source} (max_len={self.max_len})")
        return chunks

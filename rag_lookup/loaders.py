"""
Document Loading Module

WHAT THIS DOES:
Turns a file on disk (or raw PDF bytes) into one plain text string that the
chunker can split.

PDF TEXT CLEANING:
Text pulled out of a PDF is messy. For every line of every page we:
1. Strip surrounding whitespace and skip empty lines
2. Remove NUL bytes and the Unicode replacement character
3. Optionally undo a Caesar shift (some source documents are obfuscated)
4. Join lines with single spaces, pages with newlines

WHY CAESAR DECODING LIVES HERE:
The shift is a property of the source document, not of retrieval. Keeping
it in the loader means the chunker and the index only ever see clean text.
"""

import io
import logging
from pathlib import Path
from typing import Union

import PyPDF2
from PyPDF2.errors import PyPdfError

logger = logging.getLogger(__name__)


class DocumentLoadError(Exception):
    """Raised when a document cannot be read or parsed."""


def decode_caesar(text: str, shift: int) -> str:
    """
    Undo a Caesar cipher by shifting ASCII letters back by `shift`.

    Case is preserved. Digits, spaces, punctuation and non-ASCII characters
    pass through unchanged.

    EXAMPLE:
    decode_caesar("Wkh hjj", 3) -> "The egg"
    """
    result = []
    for char in text:
        if "A" <= char <= "Z":
            result.append(chr((ord(char) - ord("A") - shift) % 26 + ord("A")))
        elif "a" <= char <= "z":
            result.append(chr((ord(char) - ord("a") - shift) % 26 + ord("a")))
        else:
            result.append(char)
    return "".join(result)


def clean_pdf_line(line: str, caesar_shift: int = 0) -> str:
    """Strip, drop problem characters and optionally decode one line of PDF text."""
    line = line.strip()
    if not line:
        return ""

    line = line.replace("\x00", "").replace("\ufffd", "")

    if caesar_shift:
        line = decode_caesar(line, caesar_shift)
    return line


def extract_text_from_pdf(data: bytes, caesar_shift: int = 0) -> str:
    """
    Extract cleaned text from PDF bytes.

    Args:
        data: Raw PDF file content
        caesar_shift: Letters to shift back (0 disables decoding)

    Returns:
        Text with one space after each kept line and a newline per page

    Raises:
        DocumentLoadError: If the bytes are not a readable PDF
    """
    if not data:
        raise DocumentLoadError("PDF content is empty")

    try:
        reader = PyPDF2.PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError, KeyError, OSError) as e:
        raise DocumentLoadError(f"Could not read PDF: {e}") from e

    parts = []
    for page_text in pages:
        for line in page_text.splitlines():
            cleaned = clean_pdf_line(line, caesar_shift)
            if cleaned:
                parts.append(cleaned + " ")
        parts.append("\n")

    text = "".join(parts)
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    logger.debug(f"Extracted {len(text)} characters from {len(pages)} PDF pages")
    return text


class DocumentLoader:
    """
    Load documents from various file formats.

    WHY A SEPARATE CLASS:
    - Single responsibility: Only handles file I/O
    - Easy to add new formats
    - Testable in isolation
    """

    @staticmethod
    def load(file_path: Union[str, Path], caesar_shift: int = 0) -> tuple[str, dict]:
        """
        Load a document and return (text, metadata).

        Returns:
            tuple: (document_text, metadata_dict)
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        suffix = path.suffix.lower()

        if suffix in (".txt", ".md"):
            return DocumentLoader._load_txt(path)
        elif suffix == ".pdf":
            return DocumentLoader._load_pdf(path, caesar_shift)
        else:
            raise ValueError(f"Unsupported file format: {suffix}")

    @staticmethod
    def _load_txt(path: Path) -> tuple[str, dict]:
        """Load a text file."""
        text = path.read_text(encoding="utf-8")
        return text, {"source": str(path), "format": "txt"}

    @staticmethod
    def _load_pdf(path: Path, caesar_shift: int) -> tuple[str, dict]:
        """Load a PDF file."""
        text = extract_text_from_pdf(path.read_bytes(), caesar_shift=caesar_shift)
        return text, {
            "source": str(path),
            "format": "pdf",
            "caesar_shift": caesar_shift
        }

"""Text utilities shared by ingestion and prompt assembly.

Text handling contract
----------------------
* Incoming documents and user questions have BOM markers stripped so
  downstream processing does not see spurious characters.
* Normalization is explicit: callers opt into NFKC normalization when they
  need deterministic text, the rest of the pipeline assumes clean input.
"""

import math
import re
import unicodedata

_PARAGRAPH_SPLIT = re.compile(r"\n\n+|\n")


def clean_text(text: str, *, normalize: bool = True, ascii_only: bool = False) -> str:
    """Remove BOM markers and optionally normalize/ASCII-fold text.

    Args:
        text: Input text that may contain BOM or special characters.
        normalize: Whether to apply NFKC normalization. Enabled by default.
        ascii_only: Whether to discard non-ASCII characters.

    Returns:
        Cleaned text with BOMs removed and optional normalization applied.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    if normalize:
        cleaned = unicodedata.normalize("NFKC", cleaned)
    if ascii_only:
        cleaned = cleaned.encode("ascii", errors="ignore").decode("ascii")
    return cleaned


def normalize_text(text: str) -> str:
    """Clean text and trim surrounding whitespace."""
    return clean_text(text).strip()


def _validate_chunk_params(chunk_size: int, chunk_overlap: int) -> None:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if chunk_overlap < 0:
        raise ValueError("chunk_overlap must be non-negative")
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be less than chunk_size to avoid infinite loop")


def _fixed_chunks(text: str, chunk_size: int, chunk_overlap: int) -> list[str]:
    """Plain sliding window over the characters of ``text``."""
    chunks = []
    start = 0
    while start < len(text):
        end = start + chunk_size
        chunks.append(text[start:end])
        start = end - chunk_overlap
    return [chunk for chunk in chunks if chunk.strip()]


def _semantic_chunks(text: str, chunk_size: int, chunk_overlap: int) -> list[str]:
    """Pack whole paragraphs into chunks, carrying an overlap tail forward."""
    paragraphs = [p for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]

    chunks: list[str] = []
    current = ""

    for paragraph in paragraphs:
        candidate = f"{current}\n\n{paragraph}" if current else paragraph

        if len(candidate) <= chunk_size:
            current = candidate
            continue

        if current:
            chunks.append(current)

        if chunk_overlap > 0 and current:
            current = f"{current[-chunk_overlap:]}\n\n{paragraph}"
        else:
            current = paragraph

        # Paragraph alone is larger than a chunk
        if len(current) > chunk_size:
            pieces = _fixed_chunks(current, chunk_size, chunk_overlap)
            chunks.extend(pieces[:-1])
            current = pieces[-1] if pieces else ""

    if current:
        chunks.append(current)

    return [chunk for chunk in chunks if chunk.strip()]


def chunk_text(
    text: str,
    chunk_size: int = 800,
    chunk_overlap: int = 150,
    strategy: str = "semantic",
) -> list[str]:
    """Split text into overlapping chunks for vector search.

    The semantic strategy respects paragraph boundaries and only falls back
    to a character window for paragraphs longer than ``chunk_size``. The
    fixed strategy always uses the character window.

    Args:
        text: Text to chunk.
        chunk_size: Target size of each chunk in characters (must be positive).
        chunk_overlap: Overlap between consecutive chunks (must be less than chunk_size).
        strategy: ``"semantic"`` or ``"fixed"``.

    Returns:
        List of text chunks.

    Raises:
        ValueError: If the size parameters or the strategy are invalid.
    """
    _validate_chunk_params(chunk_size, chunk_overlap)

    if not text:
        return []

    if strategy == "semantic":
        return _semantic_chunks(text, chunk_size, chunk_overlap)
    if strategy == "fixed":
        return _fixed_chunks(text, chunk_size, chunk_overlap)
    raise ValueError(f"Unknown chunking strategy: {strategy}")


def estimate_tokens(text: str) -> int:
    """Rough token estimate (one token per four characters)."""
    return math.ceil(len(text) / 4)

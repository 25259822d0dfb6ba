"""Display-width measurement for terminal cells.

Widths are measured per code point: double-width (East Asian wide/fullwidth)
characters count 2, combining marks and control characters count 0, and
everything else counts 1.
"""

from __future__ import annotations

import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# char_width / text_width
# ---------------------------------------------------------------------------


def char_width(ch: str) -> int:
    """Return the number of terminal columns occupied by the code point *ch*."""
    cp = ord(ch)
    # Control characters
    if cp < 0x20 or (0x7F <= cp <= 0x9F):
        return 0
    # Lone surrogates never reach a terminal
    if 0xD800 <= cp <= 0xDFFF:
        return 0
    w = _wcwidth.wcwidth(ch)
    return max(w, 0)


def text_width(text: str) -> int:
    """Return the display width of *text*, summing per-character widths.

    Uses a fast path for printable ASCII and caches results for other strings.
    """
    if not text:
        return 0

    if text.isascii() and text.isprintable():
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    return _cache_width(text, sum(char_width(ch) for ch in text))


def is_single_width(ch: str) -> bool:
    """Return ``True`` if *ch* is a printable character exactly one column wide."""
    return char_width(ch) == 1

"""Style- and text-based heading classification."""

import re

ENUMERATION_PATTERN = re.compile(r"^\d+\.")

DEFAULT_HEADING_LEVEL = 3
MAX_BOLD_HEADING_LENGTH = 200
MAX_LARGE_HEADING_LENGTH = 300


def is_likely_heading(text: str, font_size: float, is_bold: bool) -> bool:
    """Decide whether a text block reads as a heading.

    Args:
        text: Trimmed text of the block.
        font_size: Aggregated font size in points (0 if unknown).
        is_bold: Aggregated bold flag.

    Returns:
        True if any of the size/weight/shape rules matches.
    """
    if font_size > 14:
        return True
    if font_size > 12 and is_bold:
        return True
    if (
        is_bold
        and len(text) < MAX_BOLD_HEADING_LENGTH
        and "." not in text
        and not ENUMERATION_PATTERN.match(text)
    ):
        return True
    return font_size > 16 and len(text) < MAX_LARGE_HEADING_LENGTH


def get_heading_level(font_size: float, is_bold: bool) -> int:
    """Map a font size to a heading level.

    18pt and 16pt both land on level 2, and everything unmatched falls back
    to level 3. Keep these thresholds as they are.
    """
    if font_size > 20:
        return 1
    if font_size > 18:
        return 2
    if font_size > 16:
        return 2
    if font_size > 14:
        return 3
    if is_bold and font_size > 12:
        return 3
    return DEFAULT_HEADING_LEVEL

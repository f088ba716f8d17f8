"""Font metadata extraction from inline style declarations."""

import re
from dataclasses import dataclass

from bs4 import Tag

FONT_SIZE_PATTERN = re.compile(r"font-size:\s*([\d.]+)pt", re.IGNORECASE)
FONT_WEIGHT_PATTERN = re.compile(r"font-weight:\s*(bold|\d+)", re.IGNORECASE)
FONT_STYLE_PATTERN = re.compile(r"font-style:\s*italic", re.IGNORECASE)

LEADING_NUMBER_PATTERN = re.compile(r"\d*\.?\d*")

BOLD_WEIGHT = 600
BOLD_TAGS = ("b", "strong")


@dataclass
class FontProperties:
    """Semantic font properties parsed from a style declaration."""

    font_size: float = 0.0
    is_bold: bool = False
    is_italic: bool = False


def _parse_number(value: str) -> float:
    # "12.5.3" style garbage still matches [\d.]+; keep the leading number.
    match = LEADING_NUMBER_PATTERN.match(value)
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def parse_style(style: str | None) -> FontProperties:
    """Parse an inline style string into font properties.

    Missing or malformed declarations fall back to the defaults
    (0pt, not bold, not italic).

    Args:
        style: Value of a ``style`` attribute, possibly None.

    Returns:
        FontProperties for the declaration.
    """
    style = style or ""

    size_match = FONT_SIZE_PATTERN.search(style)
    font_size = _parse_number(size_match.group(1)) if size_match else 0.0

    is_bold = False
    weight_match = FONT_WEIGHT_PATTERN.search(style)
    if weight_match:
        weight = weight_match.group(1)
        if weight.lower() == "bold":
            is_bold = True
        else:
            is_bold = int(weight) >= BOLD_WEIGHT

    is_italic = FONT_STYLE_PATTERN.search(style) is not None

    return FontProperties(font_size=font_size, is_bold=is_bold, is_italic=is_italic)


def _style_of(tag: Tag) -> str:
    style = tag.get("style")
    if isinstance(style, list):
        return " ".join(style)
    return style or ""


def aggregate_font_properties(element: Tag) -> FontProperties:
    """Compute the dominant font properties of an element's whole subtree.

    Heading text is often wrapped in nested ``<span>``/``<b>`` markup that
    carries the real font metadata while the outer container carries none,
    so the largest size and any boldness anywhere in the subtree win.

    Args:
        element: Element to inspect.

    Returns:
        FontProperties with the maximum font size and the combined bold flag.
        Italic is reported from the element's own style only.
    """
    own = parse_style(_style_of(element))
    font_size = own.font_size
    is_bold = own.is_bold

    for child in element.find_all(True):
        props = parse_style(_style_of(child))
        font_size = max(font_size, props.font_size)
        if props.is_bold or child.name.lower() in BOLD_TAGS:
            is_bold = True

    return FontProperties(font_size=font_size, is_bold=is_bold, is_italic=own.is_italic)

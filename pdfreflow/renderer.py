"""Serialization of sections into sanitized HTML."""

from html import escape

from pdfreflow.sections import ImageRef, Section

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


def _render_images(images: list[ImageRef]) -> str:
    return "".join(f'<img src="{escape(image.src, quote=True)}" alt="" />' for image in images if image.src)


def render_section(section: Section) -> str:
    """Render one section; empty sections produce an empty string.

    Args:
        section: Section to render.

    Returns:
        HTML fragment with all text escaped.
    """
    if not section.content and not section.images:
        return ""

    if section.is_heading:
        level = min(max(section.level, 1), 6)
        return f"<h{level}>{escape(section.content)}</h{level}>"

    if section.is_image:
        return _render_images(section.images)

    if not section.content.strip():
        return ""

    return f"<p>{escape(section.content)}</p>" + _render_images(section.images)


def render_sections(sections: list[Section]) -> str:
    """Render sections back to back with no separator."""
    return "".join(render_section(section) for section in sections)


def render_document(sections: list[Section], title: str = "document") -> str:
    """Render sections as a standalone HTML page.

    Args:
        sections: Sections to render.
        title: Page title; escaped before insertion.

    Returns:
        Complete HTML document.
    """
    return DOCUMENT_TEMPLATE.format(title=escape(title), body=render_sections(sections))

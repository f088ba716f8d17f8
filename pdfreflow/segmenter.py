"""Segmentation of per-page extractor markup into document sections."""

import logging
import re

from bs4 import BeautifulSoup, PageElement, Tag

from pdfreflow import sections as sec
from pdfreflow.headings import DEFAULT_HEADING_LEVEL, get_heading_level, is_likely_heading
from pdfreflow.sections import Section
from pdfreflow.styles import FontProperties, aggregate_font_properties

logger = logging.getLogger(__name__)


def _text_without(node: Tag, excluded: PageElement) -> str:
    """Text of a tag as get_text() sees it, minus one child's subtree."""
    types = node.interesting_string_types
    if isinstance(types, type):
        types = (types,)

    strings = []
    for child in node.children:
        if child is excluded:
            continue
        # Comments, script and style contents are not part of the text.
        candidates = child.descendants if isinstance(child, Tag) else [child]
        strings.extend(str(s) for s in candidates if type(s) in types)
    return "".join(strings)


class MarkupSegmenter:
    """Walks one page of markup and classifies elements into sections.

    Each call to :meth:`segment` owns a fresh consumed-set, so a node (and
    everything below it) contributes to at most one section per call. The
    markup tree is only read, never modified.
    """

    HEADING_TAG_PATTERN = re.compile(r"^h([1-6])$")
    PAGE_MARKER_PATTERN = re.compile(r"^page\d+$")
    BLOCK_TAGS = ("p", "div")
    TEXT_TAGS = ("p", "div", "span")

    MIN_SPAN_PARAGRAPH_LENGTH = 50
    NESTED_HEADING_FONT_SIZE = 14
    MAX_NESTED_HEADING_LENGTH = 200

    def segment(self, markup: str | Tag) -> list[Section]:
        """Segment a page of markup into an ordered list of sections.

        Args:
            markup: Markup string for one page (or several concatenated
                pages), or an already parsed tree.

        Returns:
            Sections in document order.
        """
        root = BeautifulSoup(markup, "html.parser") if isinstance(markup, str) else markup
        consumed: set[int] = set()
        sections: list[Section] = []

        for node in root.descendants:
            if not isinstance(node, Tag):
                continue
            if id(node) in consumed:
                continue
            # Page wrappers are transparent: skipped, but never claimed.
            if self.is_page_marker(node):
                continue
            if self._has_consumed_ancestor(node, root, consumed):
                continue

            sections.extend(self._process_node(node, consumed))

        logger.debug("Segmented markup into %d sections", len(sections))
        return sections

    def is_page_marker(self, node: Tag) -> bool:
        """Check whether an element is a ``<div id="pageN">`` wrapper."""
        if node.name.lower() != "div":
            return False
        node_id = node.get("id") or ""
        return self.PAGE_MARKER_PATTERN.match(node_id) is not None

    def _has_consumed_ancestor(self, node: Tag, root: Tag, consumed: set[int]) -> bool:
        parent = node.parent
        while parent is not None and parent is not root:
            if id(parent) in consumed:
                return True
            parent = parent.parent
        return False

    def _process_node(self, node: Tag, consumed: set[int]) -> list[Section]:
        tag_name = node.name.lower()

        if tag_name == "img":
            return self._process_image(node, consumed)

        heading_match = self.HEADING_TAG_PATTERN.match(tag_name)
        if heading_match:
            return self._process_heading(node, int(heading_match.group(1)), consumed)

        if tag_name in self.TEXT_TAGS:
            return self._process_text_element(node, tag_name, consumed)

        # Unknown tags never match; their children are still visited.
        return []

    def _process_image(self, node: Tag, consumed: set[int]) -> list[Section]:
        src = node.get("src")
        if not src:
            return []

        consumed.add(id(node))
        return [sec.image(src)]

    def _process_heading(self, node: Tag, level: int, consumed: set[int]) -> list[Section]:
        text = node.get_text().strip()
        if not text:
            return []

        consumed.add(id(node))
        return [sec.heading(text, level)]

    def _process_text_element(self, node: Tag, tag_name: str, consumed: set[int]) -> list[Section]:
        """Classify a ``p``/``div``/``span`` as heading, paragraph or noise.

        Args:
            node: Element to classify.
            tag_name: Lowercased tag name of the element.
            consumed: Consumed-set of the current segmentation call.

        Returns:
            Zero, one or two sections.
        """
        text = node.get_text().strip()
        if not text:
            return []

        font = aggregate_font_properties(node)

        if tag_name in self.BLOCK_TAGS:
            nested = self._extract_nested_heading(node, font)
            if nested:
                consumed.add(id(node))
                return nested

        if is_likely_heading(text, font.font_size, font.is_bold):
            consumed.add(id(node))
            return [sec.heading(text, get_heading_level(font.font_size, font.is_bold))]

        if tag_name in self.BLOCK_TAGS:
            consumed.add(id(node))
            return [sec.paragraph(text)]

        # Short spans are inline decoration.
        if len(text) > self.MIN_SPAN_PARAGRAPH_LENGTH:
            consumed.add(id(node))
            return [sec.paragraph(text)]

        return []

    def _extract_nested_heading(self, node: Tag, font: FontProperties) -> list[Section] | None:
        """Split a block whose first child is a heading into heading + paragraph.

        The first child element counts as a heading if it is an ``h1``-``h6``
        tag, or if the block's aggregated styling looks like a heading for
        the first child's text.

        Args:
            node: Block element (``p`` or ``div``).
            font: Aggregated font properties of the whole block.

        Returns:
            The heading section and, if any text remains, a trailing
            paragraph section; None if the block carries no nested heading.
        """
        first_child = next((child for child in node.children if isinstance(child, Tag)), None)
        if first_child is None:
            return None

        heading_text = first_child.get_text().strip()
        if not heading_text:
            return None

        tag_match = self.HEADING_TAG_PATTERN.match(first_child.name.lower())
        is_heading_style = font.font_size > self.NESTED_HEADING_FONT_SIZE or (
            font.is_bold and len(heading_text) < self.MAX_NESTED_HEADING_LENGTH
        )
        if not tag_match and not is_heading_style:
            return None

        if tag_match:
            level = int(tag_match.group(1))
        elif font.font_size > 18:
            level = 1
        elif font.font_size > 16:
            level = 2
        else:
            level = DEFAULT_HEADING_LEVEL

        remaining_text = _text_without(node, first_child).strip()

        result = [sec.heading(heading_text, level)]
        if remaining_text:
            result.append(sec.paragraph(remaining_text))
        return result


def segment_page(markup: str | Tag) -> list[Section]:
    """Segment one page of markup with a fresh :class:`MarkupSegmenter`."""
    return MarkupSegmenter().segment(markup)

"""Section data model shared by the segmenter, merger and renderer."""

from dataclasses import dataclass, field

HEADING = "heading"
PARAGRAPH = "paragraph"
IMAGE = "image"

SECTION_TYPES = (HEADING, PARAGRAPH, IMAGE)


@dataclass
class ImageRef:
    """Reference to an image by its source path or data URI."""

    src: str


@dataclass
class Section:
    """One reconstructed unit of the logical document."""

    type: str
    content: str = ""
    level: int = 0  # Only meaningful for headings.
    images: list[ImageRef] = field(default_factory=list)

    @property
    def is_heading(self) -> bool:
        return self.type == HEADING

    @property
    def is_paragraph(self) -> bool:
        return self.type == PARAGRAPH

    @property
    def is_image(self) -> bool:
        return self.type == IMAGE

    @property
    def is_empty(self) -> bool:
        """True if the section has nothing worth emitting."""
        if self.is_image:
            return not self.images
        return not self.content.strip()


def heading(content: str, level: int) -> Section:
    return Section(HEADING, content, level)


def paragraph(content: str) -> Section:
    return Section(PARAGRAPH, content)


def image(src: str) -> Section:
    return Section(IMAGE, "", 0, [ImageRef(src)])

"""PDF to reflowable HTML conversion driver."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import fitz  # PyMuPDF

from pdfreflow.merger import SectionMerger
from pdfreflow.renderer import render_document, render_sections
from pdfreflow.sections import Section
from pdfreflow.segmenter import MarkupSegmenter

logger = logging.getLogger(__name__)

MARKUP_FORMATS = ("html", "xhtml")

# The engine labels every page wrapper "page0" regardless of its index.
PAGE_ID_PATTERN = re.compile(r'^(\s*<div id=")page\d+(")')


def number_page_markup(markup: str, page_num: int) -> str:
    """Relabel a page wrapper with its index in the document."""
    return PAGE_ID_PATTERN.sub(rf"\g<1>page{page_num}\g<2>", markup, count=1)


class ReflowError(Exception):
    """Raised when the PDF engine cannot open or lay out a document."""


@dataclass
class ReflowOptions:
    """Configuration options for PDF to HTML reflow."""

    width: float = 595.0  # Layout viewport in points (A4).
    height: float = 842.0
    em_size: float = 12.0
    preserve_images: bool = True
    markup_format: str = "html"
    fix_hyphenation: bool = True
    merge_paragraphs: bool = True
    merge_headings: bool = True
    standalone: bool = False
    raw_markup_path: Path | None = None


class PDFReflower:
    """Converts PDF documents into clean, reflowable HTML."""

    def __init__(self, options: ReflowOptions | None = None):
        """Initialize the reflower with optional configuration.

        Args:
            options: Reflow options. Uses defaults if not provided.
        """
        self.options = options or ReflowOptions()
        if self.options.markup_format not in MARKUP_FORMATS:
            raise ValueError(f"Unsupported markup format: {self.options.markup_format}")
        self.segmenter = MarkupSegmenter()
        self.merger = SectionMerger(
            fix_hyphenation=self.options.fix_hyphenation,
            merge_paragraphs=self.options.merge_paragraphs,
            merge_headings=self.options.merge_headings,
        )

    def convert_file(self, pdf_path: str | Path, output_path: str | Path | None = None) -> str:
        """Convert a PDF file to HTML.

        Args:
            pdf_path: Path to the input PDF file.
            output_path: Optional path to write the HTML output.

        Returns:
            The generated HTML as a string.
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")

        with open(pdf_path, "rb") as f:
            html = self.convert_stream(f, source_name=pdf_path.stem)

        if output_path:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(html, encoding="utf-8")

        return html

    def convert_stream(self, stream: BinaryIO, source_name: str = "document") -> str:
        """Convert a PDF from a binary stream to HTML."""
        return self.convert_bytes(stream.read(), source_name)

    def convert_bytes(self, pdf_data: bytes, source_name: str = "document") -> str:
        """Convert PDF bytes to HTML.

        Args:
            pdf_data: Raw PDF bytes.
            source_name: Title used for standalone documents.

        Returns:
            The generated HTML as a string.
        """
        sections = self.extract_sections(pdf_data)
        if self.options.standalone:
            return render_document(sections, title=source_name)
        return render_sections(sections)

    def extract_sections(self, pdf_data: bytes) -> list[Section]:
        """Extract the merged section list of a PDF without rendering it.

        Args:
            pdf_data: Raw PDF bytes.

        Returns:
            Sections of the whole document after all merge passes.
        """
        return self.sections_from_markup(self.extract_page_markup(pdf_data))

    def extract_page_markup(self, pdf_data: bytes) -> list[str]:
        """Open and lay out a PDF, then return one markup string per page.

        Args:
            pdf_data: Raw PDF bytes.

        Returns:
            Extractor markup for each page, in page order.
        """
        try:
            doc = fitz.open(stream=pdf_data, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            raise ReflowError(f"Could not open PDF: {exc}") from exc

        try:
            self._layout_document(doc)

            flags = fitz.TEXT_PRESERVE_LIGATURES | fitz.TEXT_PRESERVE_WHITESPACE
            if self.options.preserve_images:
                flags |= fitz.TEXT_PRESERVE_IMAGES

            pages = [
                number_page_markup(page.get_text(self.options.markup_format, flags=flags), page_num)
                for page_num, page in enumerate(doc)
            ]
            logger.debug("Extracted markup for %d pages", len(pages))
        finally:
            doc.close()

        if self.options.raw_markup_path:
            self._save_raw_markup(pages)

        return pages

    def sections_from_markup(self, pages: Iterable[str]) -> list[Section]:
        """Segment each page, concatenate in page order, then merge.

        Args:
            pages: Markup strings, one per page.

        Returns:
            Merged sections of the whole document.
        """
        sections: list[Section] = []
        for page_num, markup in enumerate(pages):
            page_sections = self.segmenter.segment(markup)
            logger.debug("Page %d: %d sections", page_num, len(page_sections))
            sections.extend(page_sections)

        return self.merger.merge(sections)

    def reflow_markup(self, pages: Iterable[str]) -> str:
        """Turn already extracted page markup into clean HTML."""
        return render_sections(self.sections_from_markup(pages))

    def _layout_document(self, doc: fitz.Document) -> None:
        """Lay out reflowable documents for the configured viewport.

        Fixed-layout PDFs keep their own page geometry.
        """
        if not doc.is_reflowable:
            return

        try:
            doc.layout(width=self.options.width, height=self.options.height, fontsize=self.options.em_size)
        except (RuntimeError, ValueError) as exc:
            logger.warning("Layout failed: %s", exc)
            raise ReflowError("This document is not reflowable. Reflow mode requires a tagged document.") from exc

    def _save_raw_markup(self, pages: list[str]) -> None:
        path = Path(self.options.raw_markup_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(pages), encoding="utf-8")
        logger.info("Saved raw markup to %s (%d pages)", path, len(pages))

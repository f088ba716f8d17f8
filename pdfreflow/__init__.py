"""Reflow PDF documents into clean, logically structured HTML."""

__version__ = "0.1.0"

from pdfreflow.converter import PDFReflower, ReflowError, ReflowOptions
from pdfreflow.merger import SectionMerger, fix_hyphenated_words
from pdfreflow.renderer import render_document, render_sections
from pdfreflow.sections import ImageRef, Section
from pdfreflow.segmenter import MarkupSegmenter, segment_page

__all__ = [
    "PDFReflower",
    "ReflowOptions",
    "ReflowError",
    "MarkupSegmenter",
    "SectionMerger",
    "Section",
    "ImageRef",
    "fix_hyphenated_words",
    "render_document",
    "render_sections",
    "segment_page",
]

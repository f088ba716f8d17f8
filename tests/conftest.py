"""Pytest configuration and shared fixtures."""

import pathlib
import tempfile

import fitz  # PyMuPDF
import pytest

from pdfreflow import MarkupSegmenter, PDFReflower, SectionMerger

# Markup shaped like the engine's per-page HTML: absolutely positioned
# paragraphs, one per layout line, with font metadata on nested spans.
ABSTRACT_PAGE = """<div id="page0" style="position:relative;width:612pt;height:792pt;background-color:white">
<p style="top:98.4pt;left:128.2pt;line-height:14.3pt"><span style="font-family:NimbusRomNo9L-Medi,serif;font-size:14.3pt">Deep Clustering for Unsupervised Learning</span></p>
<p style="top:116.3pt;left:236.7pt;line-height:14.3pt"><span style="font-family:NimbusRomNo9L-Medi,serif;font-size:14.3pt">of Visual Features</span></p>
<p style="top:150.1pt;left:134.5pt;line-height:10.0pt"><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:10.0pt">Mathilde Caron, Piotr Bojanowski, Armand Joulin, and Matthijs Douze</span></p>
<p style="top:230.6pt;left:134.8pt;line-height:9.0pt"><b><span style="font-family:NimbusRomNo9L-Medi,serif;font-size:9.0pt">Abstract.</span></b><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:9.0pt"> Clustering is a class of unsupervised learning methods that</span></p>
<p style="top:241.5pt;left:134.8pt;line-height:9.0pt"><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:9.0pt">has been extensively applied and studied in computer vision. Little work</span></p>
<p style="top:252.4pt;left:134.8pt;line-height:9.0pt"><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:9.0pt">has been done to adapt it to the training of visual features on</span></p>
<p style="top:263.3pt;left:134.8pt;line-height:9.0pt"><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:9.0pt">large scale datasets. In this work, we present DeepCluster, a method that jointly</span></p>
<p style="top:274.2pt;left:134.8pt;line-height:9.0pt"><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:9.0pt">learns the parameters of a neural network and the cluster assignments of the resulting features. DeepCluster it-</span></p>
<p style="top:285.1pt;left:134.8pt;line-height:9.0pt"><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:9.0pt">eratively groups the features with a standard clustering algorithm, k-means.</span></p>
<p style="top:320.0pt;left:134.8pt;line-height:9.0pt"><span style="font-family:NimbusRomNo9L-Regu,serif;font-size:9.0pt">Keywords: unsupervised learning, clustering</span></p>
</div>
"""

PAGE_BREAK_PAGES = [
    """<div id="page1" style="position:relative;width:612pt;height:792pt">
<p style="top:90.0pt;left:72.0pt;line-height:10.0pt"><span style="font-family:Times,serif;font-size:10.0pt">We study the impact of these choices on the quality of the features and the</span></p>
</div>
""",
    """<div id="page2" style="position:relative;width:612pt;height:792pt">
<p style="top:72.0pt;left:72.0pt;line-height:10.0pt"><span style="font-family:Times,serif;font-size:10.0pt">transfer performance. We demonstrate that our approach scales to large datasets.</span></p>
</div>
""",
]


@pytest.fixture
def abstract_page():
    """Return one page of engine markup for a paper's first page."""
    return ABSTRACT_PAGE


@pytest.fixture
def page_break_pages():
    """Return two pages whose sentence is split at the page boundary."""
    return list(PAGE_BREAK_PAGES)


@pytest.fixture
def segmenter():
    """Return a fresh MarkupSegmenter."""
    return MarkupSegmenter()


@pytest.fixture
def merger():
    """Return a SectionMerger with all passes enabled."""
    return SectionMerger()


@pytest.fixture
def default_reflower():
    """Return a PDFReflower with default options."""
    return PDFReflower()


@pytest.fixture
def sample_pdf_bytes():
    """Build a small two-page PDF with a large title and body text."""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Reflow Sample", fontsize=24)
    page.insert_text((72, 120), "This is the first page of body text.", fontsize=10)
    page = doc.new_page()
    page.insert_text((72, 72), "This is the second page of body text.", fontsize=10)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for output files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield pathlib.Path(tmpdir)


@pytest.fixture
def sample_pdf_path(sample_pdf_bytes, temp_output_dir):
    """Write the sample PDF to disk and return its path."""
    path = temp_output_dir / "sample.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path

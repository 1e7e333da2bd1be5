"""
PDF text fragment extraction.

Extracts the text spans of one PDF page, in reading order, as TextFragment
objects carrying their bounding boxes for the highlighting layer.
"""

from pathlib import Path
from typing import List, Union

import fitz  # PyMuPDF

from fuzzy_highlight.config import settings
from fuzzy_highlight.core.schemas import TextFragment
from fuzzy_highlight.pipeline.interfaces import IFragmentSource, FragmentSourceError
from fuzzy_highlight.utils.logger import setup_logger

logger = setup_logger(__name__, level=settings.log_level)


class PDFPageFragmentSource(IFragmentSource):
    """
    Span-level text extraction from a single PDF page.

    Uses PyMuPDF's "dict" text output: every span of every text line
    becomes one fragment. Image blocks are skipped.
    """

    def __init__(self, pdf: Union[str, Path, bytes], page_number: int = 1):
        """
        Initialize fragment source.

        Args:
            pdf: Path to PDF file or bytes content
            page_number: 1-indexed page to extract
        """
        if page_number < 1:
            raise ValueError("page_number must be >= 1")

        self.pdf = pdf
        self.page_number = page_number

    async def get_fragments(self) -> List[TextFragment]:
        """
        Extract the page's text spans.

        Returns:
            Fragments in PyMuPDF reading order (block, line, span)

        Raises:
            FragmentSourceError: If the PDF cannot be opened or the page
                does not exist
        """
        try:
            if isinstance(self.pdf, bytes):
                doc = fitz.open(stream=self.pdf, filetype="pdf")
                filename = "<bytes>"
            else:
                path = Path(self.pdf)
                doc = fitz.open(path)
                filename = path.name
        except Exception as e:
            logger.error(f"Failed to open PDF: {str(e)}", exc_info=True)
            raise FragmentSourceError(f"Failed to open PDF: {str(e)}")

        try:
            if self.page_number > doc.page_count:
                raise FragmentSourceError(
                    f"Page {self.page_number} out of range",
                    detail=f"{filename} has {doc.page_count} pages"
                )

            page = doc[self.page_number - 1]
            text_dict = page.get_text("dict")
        except FragmentSourceError:
            raise
        except Exception as e:
            logger.error(f"Failed to extract text: {str(e)}", exc_info=True)
            raise FragmentSourceError(f"Text extraction failed: {str(e)}")
        finally:
            doc.close()

        fragments = []
        for block in text_dict.get("blocks", []):
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    fragments.append(TextFragment(
                        text=span.get("text", ""),
                        bbox=tuple(span["bbox"]) if "bbox" in span else None,
                        page_number=self.page_number,
                        font=span.get("font"),
                        size=span.get("size")
                    ))

        logger.info(
            f"Extracted {len(fragments)} fragments from {filename} page {self.page_number}"
        )

        return fragments

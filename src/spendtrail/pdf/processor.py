"""PDF text extraction for uploaded statements."""
from pathlib import Path
from typing import Optional
import pdfplumber
import pypdf

from spendtrail.utils import get_logger, PDFError

logger = get_logger()


class PDFProcessor:
    """Extracts text from statement PDFs."""

    MIN_TEXT_LENGTH = 20

    def extract_text(self, pdf_path: Path) -> str:
        """
        Extract text from PDF file.

        Args:
            pdf_path: Path to PDF file

        Returns:
            Extracted text, one block per page

        Raises:
            PDFError: If the file is missing, unreadable or yields too little text
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.is_file():
            raise PDFError(f"PDF file not found: {pdf_path}")

        text = self._extract_with_pdfplumber(pdf_path)

        if not self.validate_extraction(text):
            logger.info(f"pdfplumber extracted {len(text) if text else 0} chars, trying pypdf for {pdf_path.name}")
            text = self._extract_with_pypdf(pdf_path)

        if not self.validate_extraction(text):
            raise PDFError(
                f"Extracted text too short ({len(text) if text else 0} chars, minimum {self.MIN_TEXT_LENGTH}). "
                f"File may be scanned or corrupted."
            )

        logger.info(f"Successfully extracted {len(text)} characters from {pdf_path.name}")
        return text

    def validate_extraction(self, text: Optional[str]) -> bool:
        """Check that enough text was recovered."""
        return bool(text) and len(text) >= self.MIN_TEXT_LENGTH

    def _extract_with_pdfplumber(self, pdf_path: Path) -> Optional[str]:
        """
        Extract text using pdfplumber.

        Returns:
            Extracted text or None if failed
        """
        try:
            with pdfplumber.open(pdf_path) as pdf:
                text_parts = []
                for i, page in enumerate(pdf.pages, 1):
                    page_text = page.extract_text()
                    if page_text:
                        text_parts.append(page_text)
                    else:
                        logger.debug(f"pdfplumber: Page {i} extracted no text")

                text = "\n".join(text_parts)
                logger.debug(f"pdfplumber extracted {len(text)} chars from {len(pdf.pages)} pages in {pdf_path.name}")
                return text or None

        except Exception as e:
            logger.warning(f"pdfplumber extraction failed for {pdf_path.name}: {e}")
            return None

    def _extract_with_pypdf(self, pdf_path: Path) -> Optional[str]:
        """
        Extract text using pypdf (fallback).

        Returns:
            Extracted text or None if failed
        """
        try:
            with open(pdf_path, "rb") as f:
                reader = pypdf.PdfReader(f)
                text_parts = []
                for i, page in enumerate(reader.pages, 1):
                    page_text = page.extract_text()
                    if page_text:
                        text_parts.append(page_text)
                    else:
                        logger.debug(f"pypdf: Page {i} extracted no text")

                text = "\n".join(text_parts)
                logger.debug(f"pypdf extracted {len(text)} chars from {len(reader.pages)} pages in {pdf_path.name}")
                return text or None

        except Exception as e:
            logger.error(f"pypdf extraction failed for {pdf_path.name}: {e}")
            return None

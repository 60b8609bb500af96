"""Tests for PDF text extraction."""
import unittest
import tempfile
import shutil
from pathlib import Path

from spendtrail.pdf import PDFProcessor
from spendtrail.utils import PDFError


class TestPDFProcessor(unittest.TestCase):
    """Test PDFProcessor functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.processor = PDFProcessor()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_missing_file(self):
        """Test a path that does not exist."""
        with self.assertRaises(PDFError):
            self.processor.extract_text(self.test_dir / "missing.pdf")

    def test_corrupt_file(self):
        """Test a file that is not a PDF."""
        corrupt = self.test_dir / "corrupt.pdf"
        corrupt.write_bytes(b"this is not a pdf at all")

        with self.assertRaises(PDFError):
            self.processor.extract_text(corrupt)

    def test_validate_extraction(self):
        """Test the minimum text length check."""
        self.assertFalse(self.processor.validate_extraction(None))
        self.assertFalse(self.processor.validate_extraction("short"))
        self.assertTrue(self.processor.validate_extraction("x" * PDFProcessor.MIN_TEXT_LENGTH))


if __name__ == "__main__":
    unittest.main()

"""Tests for anchor segmentation and anchor date parsing."""
import unittest
from datetime import datetime

from spendtrail.parsing import RawSegment, iter_segments, parse_anchor_date


class TestIterSegments(unittest.TestCase):
    """Test iter_segments functionality."""

    def test_no_anchor_yields_nothing(self):
        """Test text without timestamps."""
        self.assertEqual(list(iter_segments("Statement period Sep 2025 ₹399")), [])

    def test_segments_span_to_next_anchor(self):
        """Test that each segment ends where the next anchor starts."""
        text = "Header 01 Sep, 2025 12:38 AM first ₹1 02 Sep, 2025 09:15 PM second ₹2"
        segments = list(iter_segments(text))

        self.assertEqual(segments, [
            RawSegment("01 Sep, 2025 12:38 AM", " first ₹1 "),
            RawSegment("02 Sep, 2025 09:15 PM", " second ₹2"),
        ])

    def test_is_lazy(self):
        """Test that segments are produced on demand."""
        segments = iter_segments("01 Sep, 2025 12:38 AM a 02 Sep, 2025 12:38 AM b")
        first = next(segments)
        self.assertEqual(first.anchor, "01 Sep, 2025 12:38 AM")

    def test_anchor_without_comma(self):
        """Test anchors written without the comma after the month."""
        segments = list(iter_segments("5 Oct 2025 7:05 pm Paid to X ₹10"))
        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].anchor, "5 Oct 2025 7:05 pm")


class TestParseAnchorDate(unittest.TestCase):
    """Test parse_anchor_date functionality."""

    def test_midnight_hour(self):
        """Test that 12 AM maps to hour 0."""
        self.assertEqual(parse_anchor_date("01 Sep, 2025 12:38 AM"), datetime(2025, 9, 1, 0, 38))

    def test_noon_and_afternoon(self):
        """Test PM conversion."""
        self.assertEqual(parse_anchor_date("15 Aug, 2025 12:05 PM"), datetime(2025, 8, 15, 12, 5))
        self.assertEqual(parse_anchor_date("1 sep 2025 3:07 pm"), datetime(2025, 9, 1, 15, 7))

    def test_invalid_values_raise(self):
        """Test unknown months, impossible days and bad times."""
        for anchor in [
            "01 Xyz, 2025 10:00 AM",
            "31 Feb, 2025 10:00 AM",
            "01 Sep, 2025 13:00 PM",
            "01 Sep, 2025 10:75 AM",
            "not a date",
        ]:
            with self.assertRaises(ValueError):
                parse_anchor_date(anchor)


if __name__ == "__main__":
    unittest.main()

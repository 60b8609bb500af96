"""Tests for amount and description extraction."""
import unittest
from decimal import Decimal

from spendtrail.parsing import extract_amount, extract_description
from spendtrail.parsing.extractor import build_amount_pattern, build_description_rules


class TestExtractAmount(unittest.TestCase):
    """Test extract_amount functionality."""

    def test_plain_amount(self):
        """Test a simple rupee amount after other digits."""
        self.assertEqual(extract_amount("Paid by Canara Bank 3900 ₹399"), Decimal("399"))

    def test_separators_stripped(self):
        """Test Indian and western digit grouping."""
        self.assertEqual(extract_amount("₹12,34,567.89"), Decimal("1234567.89"))
        self.assertEqual(extract_amount("total ₹1,500.00"), Decimal("1500.00"))

    def test_missing_amount(self):
        """Test text with no currency token."""
        self.assertIsNone(extract_amount("Paid to Udemy 3900"))

    def test_negative_sign(self):
        """Test minus before or after the symbol."""
        self.assertEqual(extract_amount("-₹50"), Decimal("-50"))
        self.assertEqual(extract_amount("₹-50.5"), Decimal("-50.5"))

    def test_spaced_dash_keeps_amount_positive(self):
        """Test that a dash separated from the symbol is not a sign."""
        self.assertEqual(extract_amount("Amount - ₹399"), Decimal("399"))
        self.assertEqual(extract_amount("UPI – ₹1,500.00"), Decimal("1500.00"))

    def test_first_token_wins(self):
        """Test that the first amount in the segment is used."""
        self.assertEqual(extract_amount("₹10 then ₹20"), Decimal("10"))

    def test_custom_symbols(self):
        """Test a configured symbol list."""
        pattern = build_amount_pattern(["Rs.", "₹"])
        self.assertEqual(extract_amount("debited Rs. 2,000", pattern), Decimal("2000"))


class TestExtractDescription(unittest.TestCase):
    """Test extract_description functionality."""

    def test_paid_to_stops_at_rail(self):
        """Test name terminated by a transfer-rail keyword."""
        text = "Paid to Udemy India LLP UPI Transaction ID: 561019228392 Paid by Canara Bank 3900 ₹399"
        self.assertEqual(extract_description(text), "Paid to Udemy India LLP")

    def test_received_from(self):
        """Test incoming transfers."""
        text = "Received from Asha Devi NEFT Transaction ID: 1 ₹1,500.00"
        self.assertEqual(extract_description(text), "Received from Asha Devi")

    def test_name_runs_to_end_of_text(self):
        """Test name terminated by end of text."""
        self.assertEqual(extract_description("₹200 Paid to Ravi Kumar "), "Paid to Ravi Kumar")

    def test_paid_to_has_priority(self):
        """Test that Paid to wins when both phrases are present."""
        text = "Received from Ravi Kumar UPI ref 1 Paid to Zomato Ltd UPI ₹300"
        self.assertEqual(extract_description(text), "Paid to Zomato Ltd")

    def test_case_insensitive(self):
        """Test upper-case statements."""
        self.assertEqual(extract_description("PAID TO ZOMATO IMPS ₹1"), "Paid to ZOMATO")

    def test_default_description(self):
        """Test fallback when no directional phrase matches."""
        self.assertEqual(extract_description("Cashback credited ₹25"), "Transaction")

    def test_underscore_not_part_of_name(self):
        """Test that names are letters, digits, spaces and periods only."""
        self.assertEqual(extract_description("Paid to ravi_kumar UPI ₹5"), "Transaction")
        self.assertEqual(extract_description("Paid to R. K. Stores 2 UPI ₹5"), "Paid to R. K. Stores 2")

    def test_name_length_bound(self):
        """Test that over-long names do not match."""
        rules = build_description_rules(max_name_length=10)
        self.assertEqual(extract_description("Paid to Ravi Kumar UPI ₹5", rules), "Paid to Ravi Kumar")
        self.assertEqual(extract_description("Paid to Udemy India LLP UPI ₹5", rules), "Transaction")

    def test_invalid_name_length(self):
        """Test that the bound must be positive."""
        with self.assertRaises(ValueError):
            build_description_rules(max_name_length=0)

    def test_custom_rail_keywords(self):
        """Test a configured rail keyword list."""
        rules = build_description_rules(["SWIFT"])
        self.assertEqual(extract_description("Paid to Acme Corp SWIFT ₹5", rules), "Paid to Acme Corp")


if __name__ == "__main__":
    unittest.main()

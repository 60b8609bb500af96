"""Statement import flow: PDF -> parser -> Gemini -> batch."""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from spendtrail.config import get_settings
from spendtrail.llm import ClassifiedTransaction, PreferenceBook, TransactionClassifier
from spendtrail.parsing import StatementParser
from spendtrail.pdf import PDFProcessor
from spendtrail.utils import get_logger, set_user_context

logger = get_logger()


class ImportStatus(Enum):
    SUCCESS = "success"
    NO_TRANSACTIONS = "no_transactions"


@dataclass
class ImportResult:
    user_id: str
    status: ImportStatus
    batch_id: Optional[str] = None
    transactions: List[ClassifiedTransaction] = field(default_factory=list)
    discarded_segments: int = 0
    unclassified: int = 0

    @property
    def transactions_count(self) -> int:
        return len(self.transactions)


class StatementImporter:
    """Orchestrates one statement upload into a classified batch."""

    def __init__(
        self,
        parser: Optional[StatementParser] = None,
        classifier: Optional[TransactionClassifier] = None,
        preferences: Optional[PreferenceBook] = None,
        pdf_processor: Optional[PDFProcessor] = None
    ):
        self.parser = parser or StatementParser.from_settings(get_settings())
        self.classifier = classifier or TransactionClassifier()
        self.preferences = preferences or PreferenceBook()
        self.pdf_processor = pdf_processor or PDFProcessor()

    def import_pdf(self, pdf_path: Path, user_id: str) -> ImportResult:
        """
        Import a statement PDF.

        Raises:
            PDFError: If text cannot be extracted
        """
        logger.info(f"Processing file: {Path(pdf_path).name}")
        text = self.pdf_processor.extract_text(pdf_path)
        return self.import_text(text, user_id)

    def import_text(self, text: str, user_id: str) -> ImportResult:
        """
        Parse, classify and batch extracted statement text.

        A statement with no recognizable transactions is reported with
        status NO_TRANSACTIONS rather than raised.
        """
        set_user_context(user_id)
        try:
            report = self.parser.parse_report(text)

            if report.is_empty:
                logger.warning(
                    f"No transactions found ({report.segments_seen} segments examined); "
                    f"statement format may be unsupported"
                )
                return ImportResult(
                    user_id=user_id,
                    status=ImportStatus.NO_TRANSACTIONS,
                    discarded_segments=len(report.discarded)
                )

            parsed = report.transactions
            classifications = self.classifier.classify_batch(parsed)
            descriptions = self.classifier.improve_descriptions(
                parsed,
                self.preferences.get_examples(user_id)
            )

            batch_id = str(uuid.uuid4())
            result = ImportResult(
                user_id=user_id,
                status=ImportStatus.SUCCESS,
                batch_id=batch_id,
                discarded_segments=len(report.discarded)
            )

            for index, (txn, description) in enumerate(zip(parsed, descriptions), 1):
                classification = classifications.get(index)
                if classification is None:
                    result.unclassified += 1
                    continue

                result.transactions.append(ClassifiedTransaction(
                    date=txn.date,
                    description=description or txn.description,
                    amount=txn.amount,
                    category=classification.category,
                    type=classification.type,
                    merchant=classification.merchant,
                    confidence=classification.confidence,
                    note=classification.note,
                    batch_id=batch_id
                ))

            logger.info(
                f"Batch {batch_id}: {result.transactions_count} transactions imported, "
                f"{result.unclassified} unclassified, {result.discarded_segments} segments discarded"
            )
            return result
        finally:
            set_user_context(None)

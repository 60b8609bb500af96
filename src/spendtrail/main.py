"""Command line entry point."""
import sys
import argparse
from pathlib import Path

from spendtrail.config import get_settings
from spendtrail.llm import CATEGORIES, TYPES, Aggregator, PreferenceBook, TransactionClassifier
from spendtrail.orchestrator import StatementImporter, ImportStatus
from spendtrail.parsing import StatementParser
from spendtrail.pdf import PDFProcessor
from spendtrail.utils import get_logger, set_log_level, SpendTrailError, StatementError

logger = get_logger()


def _read_statement(path: Path) -> str:
    """Read statement text from a PDF or a plain-text dump."""
    if path.suffix.lower() == ".pdf":
        return PDFProcessor().extract_text(path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StatementError(f"Cannot read statement {path}: {e}")


def parse_command(path: Path) -> int:
    """Print parsed transactions without calling any external service."""
    parser = StatementParser.from_settings(get_settings())
    report = parser.parse_report(_read_statement(path))

    if report.is_empty:
        print("No transactions found. Please check the file format.")
        return 1

    for txn in report.transactions:
        print(f"{txn.date.strftime('%Y-%m-%d %H:%M')}  {txn.amount:>14}  {txn.description}")
    print(f"\n{len(report.transactions)} transactions, {len(report.discarded)} segments discarded")
    return 0


def import_command(path: Path, user_id: str) -> int:
    """Run the full import flow and print the batch."""
    importer = StatementImporter()
    if path.suffix.lower() == ".pdf":
        result = importer.import_pdf(path, user_id)
    else:
        result = importer.import_text(_read_statement(path), user_id)

    if result.status is ImportStatus.NO_TRANSACTIONS:
        print("No transactions found. Please check the file format.")
        return 1

    print(f"Batch {result.batch_id}: {result.transactions_count} transactions")
    for txn in result.transactions:
        print(
            f"{txn.date.strftime('%Y-%m-%d')}  {txn.amount:>12}  {txn.category:<13} "
            f"{txn.type:<10} {txn.confidence:>3}%  {txn.description}"
        )
    return 0


def analytics_command(path: Path, user_id: str, group_by: str, summary: bool = False) -> int:
    """Import a statement and print its analytics."""
    importer = StatementImporter()
    result = importer.import_text(_read_statement(path), user_id)
    if result.status is ImportStatus.NO_TRANSACTIONS:
        print("No transactions found. Please check the file format.")
        return 1

    report = Aggregator().analytics(result.transactions, group_by=group_by)

    print(f"By {group_by}:")
    for group in report.groups:
        print(f"  {group.key:<15} {group.total:>14} ({group.count} txns, avg {group.average})")
    print("By month:")
    for month in report.monthly:
        print(f"  {month.year}-{month.month:02d}      {month.total:>14} ({month.count} txns)")
    print("By type:")
    for share in report.types:
        print(f"  {share.type:<15} {share.total:>14} {share.percentage:>7}%")
    print(f"Total: {report.total_amount}")

    if summary:
        print()
        print(importer.classifier.summarize(report))
    return 0


def classify_command(description: str, merchant: str = "") -> int:
    """Classify one manually entered transaction."""
    classification = TransactionClassifier().classify_one(description, merchant)

    print(f"Category:   {classification.category}")
    print(f"Type:       {classification.type}")
    if classification.merchant:
        print(f"Merchant:   {classification.merchant}")
    print(f"Confidence: {classification.confidence}%")
    if classification.note:
        print(f"Note:       {classification.note}")
    return 0


def prefer_command(args: argparse.Namespace) -> int:
    """Record a user's preferred labelling for a merchant."""
    book = PreferenceBook()
    if args.delete:
        deleted = book.delete_preference(args.user, args.merchant)
        print("Deleted" if deleted else "No such preference")
        return 0 if deleted else 1

    preference = book.save_preference(
        args.user, args.merchant, args.description, args.category, args.type, args.tag
    )
    print(f"Saved '{preference.merchant}' -> '{preference.description}' (confidence {preference.confidence})")
    return 0


def preferences_command(user_id: str, search: str = None) -> int:
    """List stored preferences."""
    book = PreferenceBook()
    preferences = book.find_similar(user_id, search) if search else book.get_preferences(user_id)

    if not preferences:
        print("No preferences found.")
        return 0

    for pref in preferences:
        print(
            f"{pref.merchant:<30} {pref.description:<30} {pref.category:<13} "
            f"{pref.type:<10} used {pref.usage_count}x, confidence {pref.confidence}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SpendTrail statement importer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_p = subparsers.add_parser("parse", help="Extract transactions without classification")
    parse_p.add_argument("file", type=Path, help="Statement PDF or text file")

    import_p = subparsers.add_parser("import", help="Extract, classify and batch transactions")
    import_p.add_argument("file", type=Path)
    import_p.add_argument("--user", required=True, help="User ID")

    analytics_p = subparsers.add_parser("analytics", help="Import a statement and summarise it")
    analytics_p.add_argument("file", type=Path)
    analytics_p.add_argument("--user", required=True, help="User ID")
    analytics_p.add_argument("--group-by", choices=["category", "type"], default="category")
    analytics_p.add_argument("--summary", action="store_true", help="Add a Gemini-written spending summary")

    classify_p = subparsers.add_parser("classify", help="Classify a single transaction description")
    classify_p.add_argument("description")
    classify_p.add_argument("--merchant", default="")

    prefer_p = subparsers.add_parser("prefer", help="Save or delete a merchant preference")
    prefer_p.add_argument("--user", required=True, help="User ID")
    prefer_p.add_argument("--merchant", required=True)
    prefer_p.add_argument("--description", default="")
    prefer_p.add_argument("--category", choices=CATEGORIES, default="Other")
    prefer_p.add_argument("--type", choices=TYPES, default="Other")
    prefer_p.add_argument("--tag", action="append", default=[])
    prefer_p.add_argument("--delete", action="store_true")

    prefs_p = subparsers.add_parser("preferences", help="List merchant preferences")
    prefs_p.add_argument("--user", required=True, help="User ID")
    prefs_p.add_argument("--search", help="Find preferences similar to this term")

    return parser


def main(argv=None):
    """Main entry point for SpendTrail."""
    args = build_parser().parse_args(argv)

    try:
        set_log_level(get_settings().log_level)

        if args.command == "parse":
            code = parse_command(args.file)
        elif args.command == "import":
            code = import_command(args.file, args.user)
        elif args.command == "analytics":
            code = analytics_command(args.file, args.user, args.group_by, args.summary)
        elif args.command == "classify":
            code = classify_command(args.description, args.merchant)
        elif args.command == "prefer":
            code = prefer_command(args)
        else:
            code = preferences_command(args.user, args.search)
    except SpendTrailError as e:
        logger.error(f"{type(e).__name__}: {e}")
        code = 2
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
        code = 130

    sys.exit(code)


if __name__ == "__main__":
    main()

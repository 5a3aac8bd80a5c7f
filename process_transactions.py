"""
process_transactions.py
-----------------------
Turn raw transaction records (parsed from CSV or JSON uploads, or supplied
directly by the host) into a canonical batch, and print a KPI / anomaly
summary for a file from the command line.

Usage:

    python process_transactions.py [--data uploads/october.csv] [--deep]

Without ``--data`` the default CSV from ``config.DEFAULT_TRANSACTIONS_PATH``
is used, falling back to the built-in sample batch.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import math
import time
from io import StringIO
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

import config
from logging_setup import configure_logging, get_logger
from models import IngestResult, Transaction, TransactionStatus
from sample_data import SAMPLE_TRANSACTIONS
from sanitize import normalize_date, parse_iso_date, sanitize_amount

logger = get_logger("financeiq.process_transactions")

VALID_STATUSES = {s.value for s in TransactionStatus}


class IngestError(ValueError):
    """Raised when an upload cannot be read as CSV or JSON at all."""


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if not _is_blank(value):
            return value
    return None


def _status(raw: Any) -> TransactionStatus:
    if _is_blank(raw):
        return TransactionStatus.COMPLETED
    status = str(raw).strip().lower()
    if status not in VALID_STATUSES:
        logger.debug("Unknown status %r, treating as completed", raw)
        return TransactionStatus.COMPLETED
    return TransactionStatus(status)


def ingest_records(records: Iterable[Mapping[str, Any]], source: str = "records") -> IngestResult:
    """Build a canonical batch from raw records.

    Entries that are not mappings, and records without a resolvable calendar
    date, are dropped but still counted as supplied. Every other field
    degrades to a default instead of rejecting the record.
    """
    rows = list(records)
    batch_stamp = str(int(time.time() * 1000))
    seen_ids: set[str] = set()
    accepted: List[Transaction] = []

    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            logger.debug("Dropping record %d: not a mapping (%r)", index, row)
            continue
        txn_date = parse_iso_date(normalize_date(row.get("date")))
        if txn_date is None:
            logger.debug("Dropping record %d: no usable date (%r)", index, row.get("date"))
            continue

        raw_id = row.get("id")
        txn_id = f"{batch_stamp}-{index}" if _is_blank(raw_id) else str(raw_id).strip()
        if txn_id in seen_ids:
            txn_id = f"{txn_id}-{index}"
        seen_ids.add(txn_id)

        category = row.get("category")
        accepted.append(
            Transaction(
                id=txn_id,
                date=txn_date,
                description=str(_first_present(row, "description", "desc") or "Imported"),
                amount=sanitize_amount(_first_present(row, "amount", "value")),
                status=_status(row.get("status")),
                category=None if _is_blank(category) else str(category).strip(),
            )
        )

    result = IngestResult(transactions=tuple(accepted), supplied=len(rows), source=source)
    if result.dropped:
        logger.warning("%s from %s", result.message, source)
    else:
        logger.info("%s from %s", result.message, source)
    return result


def parse_csv_text(text: str) -> List[dict]:
    """Parse CSV text into records with trimmed, lower-cased headers; all values stay strings."""
    if not text or not text.strip():
        return []
    try:
        df = pd.read_csv(StringIO(text), dtype=str, keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as exc:
        raise IngestError(f"Could not parse CSV: {exc}") from exc

    df.columns = [str(c).strip().lower() for c in df.columns]
    return df.to_dict(orient="records")


def parse_json_text(text: str) -> List[dict]:
    """Parse a JSON list of records, or an object holding a ``transactions`` list."""
    payload = json.loads(text)
    if isinstance(payload, dict) and isinstance(payload.get("transactions"), list):
        payload = payload["transactions"]
    if not isinstance(payload, list):
        raise IngestError("JSON upload must be a list of transaction objects")
    return [item for item in payload if isinstance(item, dict)]


def parse_uploaded_text(text: str) -> List[dict]:
    """Try JSON first, then CSV, the way the upload box accepts either."""
    try:
        return parse_json_text(text)
    except json.JSONDecodeError:
        return parse_csv_text(text)


def load_transactions_file(path: Path) -> IngestResult:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise IngestError(f"Failed to read {path}: {exc}") from exc

    if path.suffix.lower() == ".json":
        records = parse_json_text(text)
    elif path.suffix.lower() == ".csv":
        records = parse_csv_text(text)
    else:
        records = parse_uploaded_text(text)
    return ingest_records(records, source=str(path))


def load_default_transactions(path: Optional[Path] = None) -> IngestResult:
    """Load the default CSV, falling back to the built-in sample batch."""
    path = Path(path or config.DEFAULT_TRANSACTIONS_PATH)
    try:
        result = load_transactions_file(path)
    except ValueError as exc:
        logger.warning("Unable to load default transactions (%s), using built-in sample data", exc)
    else:
        if result.accepted:
            return result
        logger.warning("Default transactions file %s had no usable rows, using built-in sample data", path)
    return ingest_records(SAMPLE_TRANSACTIONS, source="built-in sample")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Summarize a transaction file: KPIs and anomalies")
    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="CSV or JSON file of transactions (defaults to the bundled default CSV).",
    )
    parser.add_argument(
        "--deep",
        action="store_true",
        help="Also run the slower, more sensitive anomaly scan.",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: INFO)")
    return parser.parse_args()


def main() -> None:
    from dashboard import compute_kpis, format_inr
    from insights import deep_scan, quick_scan

    args = parse_args()
    configure_logging(args.log_level)

    result = load_transactions_file(Path(args.data)) if args.data else load_default_transactions()
    batch = result.transactions
    kpis = compute_kpis(batch)

    print(result.message)
    print(f"Total revenue:   {format_inr(kpis.total_revenue)}")
    print(f"Total expenses:  {format_inr(kpis.total_expenses)}")
    print(f"Net profit:      {format_inr(kpis.net_profit)}")
    print(f"Active accounts: {kpis.active_accounts}")

    report = quick_scan(batch)
    if args.deep:
        report = asyncio.run(deep_scan(batch))
    print(f"{report.label} (|z| >= {report.z_threshold:g}, {report.mode})")
    for txn in batch:
        if txn.id in report.ids:
            print(f"  {txn.date.isoformat()}  {txn.description}  {format_inr(txn.amount)}")


if __name__ == "__main__":
    main()

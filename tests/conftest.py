"""Shared fixtures for the engine tests."""

from datetime import date
from pathlib import Path

import pytest

from models import Transaction
from process_transactions import ingest_records
from sample_data import SAMPLE_TRANSACTIONS

PROJECT_ROOT = Path(__file__).parent.parent


def make_txn(txn_id, amount, description="Misc", when=date(2025, 10, 1), status="completed"):
    return Transaction(id=str(txn_id), date=when, description=description, amount=amount, status=status)


@pytest.fixture
def sample_batch():
    """The built-in ten-transaction batch, ingested."""
    return ingest_records(SAMPLE_TRANSACTIONS).transactions


@pytest.fixture
def default_csv_path():
    return PROJECT_ROOT / "data" / "default-transactions.csv"

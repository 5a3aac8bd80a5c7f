import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Default batch shown before anything is uploaded
DEFAULT_TRANSACTIONS_PATH = Path(
    os.getenv("FINANCEIQ_DEFAULT_CSV", Path(__file__).parent / "data" / "default-transactions.csv")
)

# Anomaly sensitivity: quick (strict) scan and the slower, lenient "deep" scan
QUICK_Z_THRESHOLD = float(os.getenv("FINANCEIQ_QUICK_Z", "2.0"))
DEEP_Z_THRESHOLD = float(os.getenv("FINANCEIQ_DEEP_Z", "1.5"))
DEEP_SCAN_DELAY_SECONDS = float(os.getenv("FINANCEIQ_DEEP_DELAY_SECONDS", "0.7"))

# Tool server
SERVER_HOST = os.getenv("FINANCEIQ_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("FINANCEIQ_PORT", "8001"))

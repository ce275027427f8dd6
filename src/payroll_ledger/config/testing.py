import os
import tempfile

SECRET_KEY = "test-secret-key"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_ledger_test"),
}

DEBUG = False
# Tests inject an in-memory store; never touch MySQL on startup.
AUTO_INIT_DB = False

REPORTS_DIR = os.getenv("REPORTS_DIR", os.path.join(tempfile.gettempdir(), "payroll_ledger_reports"))
DEFAULT_EXPORT_FORMAT = "xlsx"
LOG_LEVEL = "WARNING"

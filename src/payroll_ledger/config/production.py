import os

SECRET_KEY = os.environ["SECRET_KEY"]

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_ledger"),
}

DEBUG = False
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

REPORTS_DIR = os.getenv("REPORTS_DIR", "/var/lib/payroll_ledger/reports")
DEFAULT_EXPORT_FORMAT = os.getenv("DEFAULT_EXPORT_FORMAT", "xlsx")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

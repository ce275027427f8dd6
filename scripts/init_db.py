"""Create the database and the kv_store table.

Usage: APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from payroll_ledger.config import get_settings_module
from payroll_ledger.database.bootstrap import apply_schema, list_tables
from payroll_ledger.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_dict(settings.DB_CONFIG)
    conn = DatabaseConnection.get_instance(config)

    apply_schema(conn)
    tables = list_tables(conn)
    print(
        "OK: kv_store ready -> "
        f"{config.user}@{config.host}:{config.port}/{config.database} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()

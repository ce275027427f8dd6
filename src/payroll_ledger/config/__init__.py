import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, development by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "payroll_ledger.config.production"

    if env in {"test", "testing"}:
        return "payroll_ledger.config.testing"

    return "payroll_ledger.config.development"

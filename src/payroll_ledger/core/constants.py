"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_FOLDER = "Default"
DEFAULT_FULL_DAY_RATE = Decimal("500")
DEFAULT_HALF_DAY_RATE = Decimal("250")

NOTE_HIGH = 500
NOTE_LOW = 100
CURRENCY_SYMBOL = "₹"

# Storage keys
ATTENDANCE_KEY = "attendance"
CURRENT_ATTENDANCE_KEY = "currentAttendance"
ADVANCES_KEY = "advances"
FOLDER_RATES_KEY = "folderRates"
SAVED_REPORTS_KEY = "savedReports"
WORKERS_KEY = "workers"
FOLDERS_KEY = "folders"

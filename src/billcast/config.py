"""Application-wide settings and defaults."""

DATA_PATH_ENV = "BILLCAST_DATA_PATH"
LOG_LEVEL_ENV = "BILLCAST_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

DEFAULT_DATA_DIR = ".billcast"
DEFAULT_DATA_FILE = "finances.json"

# Income book horizon and 30-day outlook length
DEFAULT_WINDOW_MONTHS = 6
OUTLOOK_DAYS = 30

# How many savings payments the income book pulls in
SAVINGS_PAYMENT_LIMIT = 100

CREDIT_CARD_CATEGORY_NAME = "Credit Card"

# Bi-monthly pay lands on this day and on the last day of the month
MID_MONTH_PAY_DAY = 15

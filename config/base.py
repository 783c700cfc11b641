"""Settings shared by every environment; each module overrides what differs."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "staff_payroll"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# Empty means console only
LOG_FILE = os.getenv("LOG_FILE", "")

# Leave policy
DEFAULT_ANNUAL_PAID_LEAVES_QUOTA = int(os.getenv("DEFAULT_ANNUAL_PAID_LEAVES_QUOTA", "12"))
QUOTA_WRITE_RETRIES = int(os.getenv("QUOTA_WRITE_RETRIES", "3"))

# Payroll policy (payable share of a short day, half-day credit, overtime credit per day)
SHORT_DAY_WEIGHT = os.getenv("SHORT_DAY_WEIGHT", "0.5")
HALF_DAY_WEIGHT = os.getenv("HALF_DAY_WEIGHT", "0.5")
OVERTIME_DAY_RATE = os.getenv("OVERTIME_DAY_RATE", "1")

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_ANNUAL_PAID_LEAVES_QUOTA = 12
DEFAULT_SHORT_DAY_WEIGHT = Decimal("0.5")
DEFAULT_HALF_DAY_WEIGHT = Decimal("0.5")
DEFAULT_OVERTIME_DAY_RATE = Decimal("1")
DEFAULT_QUOTA_WRITE_RETRIES = 3
CURRENCY_QUANTUM = Decimal("0.01")
DAY_QUANTUM = Decimal("0.01")

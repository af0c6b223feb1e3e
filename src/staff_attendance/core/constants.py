"""Constants and defaults.

Note: Keep business-rule times here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_M = 6_371_000

CHECKIN_CUTOFF = time(7, 0)
LATE_CHECKIN_WINDOW = (time(6, 30), time(7, 0))

WEEKDAY_CHECKOUT_CUTOFF = time(14, 0)
WEEKDAY_CHECKOUT_WINDOW = (time(14, 0), time(14, 30))
SATURDAY_CHECKOUT_CUTOFF = time(12, 0)
SATURDAY_CHECKOUT_WINDOW = (time(12, 0), time(12, 30))

DEFAULT_LIVE_WINDOW_MINUTES = 10
DEFAULT_TIMEZONE = "Asia/Jakarta"

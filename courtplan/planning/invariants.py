"""Percentage-plan invariants - single source of truth.

Every validator, upcaster and engine component imports its numeric
limits from here.

All plan percentages are PERCENT OF WHOLE: an Area or Exercise value is
measured against total training time, never against its parent.
"""

# Grand total every complete plan must reach
REQUIRED_TOTAL_PERCENT = 100.0

# Rounding tolerance for every sum check (percentage points)
SUM_TOLERANCE_PERCENT = 0.5

# Allowed range for any single percentage
MIN_PERCENT = 0.0
MAX_PERCENT = 100.0

# Current document format (absolute percentages)
CURRENT_PLAN_VERSION = 2

# Legacy detection: an Area above this value is read as percent-of-parent
LEGACY_RELATIVE_AREA_THRESHOLD = 50.0

# Upcast totals further than this from 100 are discarded
LEGACY_MAX_TOTAL_DISCREPANCY = 20.0

# Upcast totals closer than this to 100 are left untouched
LEGACY_ADJUST_MIN_DISCREPANCY = 0.1

# Default analysis window for logged practice (days)
DEFAULT_WINDOW_DAYS = 30

# Maximum supporting errors reported for a blocked plan
MAX_BLOCKING_ERRORS = 3

"""Scoring rules and constants."""
from typing import Dict, Tuple

# Firmographic scoring points by reason code
SCORING_RULES: Dict[str, int] = {
    # Rank metric (lower is better)
    "RANK_TOP": 30,       # < 1,000
    "RANK_MID": 15,       # 1,000-9,999
    "RANK_LOW": 5,        # >= 10,000

    # Employee count (lower bound of the range)
    "EMP_500": 20,        # > 500
    "EMP_200": 15,        # 200-500
    "EMP_100": 10,        # 100-199
    "EMP_SMALL": 5,       # < 100, including unparseable

    # Company age in calendar years
    "AGE_YOUNG": 20,      # < 5
    "AGE_GROWTH": 10,     # 5-9
    "AGE_MATURE": 5,      # >= 10

    # Target industry (flat, not per match)
    "INDUSTRY": 20,

    # Operating status
    "ACTIVE": 10,
}

RANK_TOP_MAX = 1000
RANK_MID_MAX = 10000

EMPLOYEES_LARGE_MIN = 500     # strictly greater than
EMPLOYEES_MID_MIN = 200
EMPLOYEES_SMALL_MIN = 100

AGE_YOUNG_MAX = 5
AGE_GROWTH_MAX = 10

TARGET_INDUSTRIES: Tuple[str, ...] = ("technology", "software", "ai")

UNKNOWN_EMPLOYEES = "N/A"
ACTIVE_STATUS = "active"

# Status bands: hot=80+, warm=50-79, cold<50
HOT_MIN = 80
WARM_MIN = 50

# Conversion probability (%) per band
CONVERSION_HOT = 90
CONVERSION_WARM = 60
CONVERSION_COLD = 30

# Maximum attainable score under the firmographic rules
MAX_SCORE = 100


# Manual-entry scoring (leads typed into the add-lead form)
MANUAL_INDUSTRY_POINTS: Dict[str, int] = {
    "artificial intelligence": 25,
    "machine learning": 25,
    "software": 25,
    "technology": 20,
    "consulting": 10,
}

MANUAL_SIZE_POINTS: Dict[str, int] = {
    "enterprise": 25,
    "mid-market": 20,
    "small business": 15,
    "startup": 10,
}

MANUAL_TARGET_KEYWORDS: Tuple[str, ...] = (
    "ai",
    "automation",
    "digital transformation",
    "machine learning",
    "data",
    "cloud",
    "saas",
)
MANUAL_KEYWORD_POINTS = 5
MANUAL_KEYWORD_MAX = 20

MANUAL_ENGAGEMENT_POINTS: Dict[str, int] = {
    "demo_request": 10,
    "content_download": 5,
    "email_click": 3,
    "website_visit": 2,
    "email_open": 1,
}
MANUAL_ENGAGEMENT_MAX = 20

# Recency of the latest engagement, in days
MANUAL_RECENCY_HOT_DAYS = 7
MANUAL_RECENCY_WARM_DAYS = 30
MANUAL_RECENCY_HOT = 10
MANUAL_RECENCY_WARM = 5

# Funding (USD)
MANUAL_FUNDING_LARGE = 10_000_000
MANUAL_FUNDING_SMALL = 1_000_000
MANUAL_FUNDING_LARGE_POINTS = 10
MANUAL_FUNDING_SMALL_POINTS = 5

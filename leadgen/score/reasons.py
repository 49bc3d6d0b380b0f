"""Human-readable reason generation."""
import math
from typing import Any, Dict, Iterable, Optional

from leadgen.utils.parsing import parse_number


def format_reason_code(code: str, value: Any = None) -> str:
    """
    Format a reason code into human-readable text.

    Args:
        code: Reason code (e.g., "RANK_TOP", "EMP_200")
        value: Optional value to include in reason

    Returns:
        Human-readable reason string
    """
    reason_map = {
        "RANK_TOP": f"Rank {value or 'under 1,000'}",
        "RANK_MID": f"Rank {value or '1,000-9,999'}",
        "RANK_LOW": f"Rank {value or '10,000+'}",
        "EMP_500": f"{value or '500+'} employees",
        "EMP_200": f"{value or '200-500'} employees",
        "EMP_100": f"{value or '100-199'} employees",
        "EMP_SMALL": f"{value or 'Under 100'} employees",
        "AGE_YOUNG": f"Founded {value or 'under 5 years ago'}",
        "AGE_GROWTH": f"Founded {value or '5-9 years ago'}",
        "AGE_MATURE": f"Founded {value or '10+ years ago'}",
        "INDUSTRY": f"Target industry{': ' + str(value) if value else ''}",
        "ACTIVE": "Actively operating",
    }

    return reason_map.get(code, code)


def compose_reasons(reason_codes: Iterable[str], company: Optional[Dict] = None) -> str:
    """
    Compose human-readable reasons from reason codes.

    Args:
        reason_codes: Reason codes in rule order
        company: Company row for value extraction

    Returns:
        Human-readable reason string
    """
    company = company or {}
    reasons = []

    for code in reason_codes:
        value = None

        # Extract relevant value from the company row
        if code.startswith("RANK_"):
            rank = parse_number(company.get("cb_rank"))
            if rank is not None and math.isfinite(rank):
                value = f"{int(rank):,}"
        elif code.startswith("EMP_"):
            value = company.get("num_employees") or None
            if not isinstance(value, str):
                value = None
        elif code == "INDUSTRY":
            value = company.get("industries") or None
            if not isinstance(value, str):
                value = None

        reasons.append(format_reason_code(code, value))

    return "; ".join(reasons)

"""Rule-based extractors.

Each extractor is a pure function over cleaned email text that produces one
field of a subscription guess.
"""

from .amount import extract_amount, validate_amount
from .category import CATEGORY_PATTERNS, detect_category
from .cycle import CYCLE_PATTERNS, detect_billing_cycle
from .dates import parse_email_date
from .normalize import clean_html, clean_text, normalize_email
from .service_name import extract_service_name
from .trial import TrialInfo, extract_trial_info

__all__ = [
    "CATEGORY_PATTERNS",
    "CYCLE_PATTERNS",
    "TrialInfo",
    "clean_html",
    "clean_text",
    "detect_billing_cycle",
    "detect_category",
    "extract_amount",
    "extract_service_name",
    "extract_trial_info",
    "normalize_email",
    "parse_email_date",
    "validate_amount",
]

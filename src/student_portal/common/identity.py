"""Phone number <-> synthetic login e-mail mapping.

Students log in with their mobile number; the account store keys them by a
synthetic e-mail. Both directions return ``""`` for empty input instead of
raising, so callers must check the result.
"""

from __future__ import annotations

import re
from typing import Optional

from ..core.constants import SYNTHETIC_LOGIN_DOMAIN

_NON_DIGITS = re.compile(r"\D")


def digits_only(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", str(value or ""))


def number_to_email(number: Optional[str], *, domain: str = SYNTHETIC_LOGIN_DOMAIN) -> str:
    digits = digits_only(number)
    if not digits:
        return ""
    return f"{digits}@{domain}".lower()


def email_to_number(email: Optional[str]) -> str:
    return digits_only((email or "").split("@")[0])

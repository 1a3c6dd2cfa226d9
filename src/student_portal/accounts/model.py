from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Account:
    """Login account keyed by the synthetic e-mail.

    Note: plain data object, no store access here.
    """

    email: str
    password_hash: str
    is_active: bool = True

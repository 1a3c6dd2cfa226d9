from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.identity import email_to_number, number_to_email
from ..common.validators import require_min_length, require_non_empty
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Account
from .repository import AccountRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    email: str
    number: str


class AuthService:
    """Use case: authenticate a student (login with number + password)."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def authenticate(self, number: str, password: str) -> SessionUser:
        number = require_non_empty(number, "Number")
        require_non_empty(password, "Password")

        email = number_to_email(number)
        if not email:
            raise ValidationError("Number must contain digits")

        account = self._accounts.get_by_email(email)
        if not account or not account.is_active:
            raise AuthenticationError()

        try:
            ok = check_password_hash(account.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            logger.info("Failed login for %s", email)
            raise AuthenticationError()

        return SessionUser(email=email, number=email_to_number(email))

    def set_password(self, number: str, password: str) -> str:
        """Create or reset the account of *number*; returns its login e-mail."""
        email = number_to_email(require_non_empty(number, "Number"))
        if not email:
            raise ValidationError("Number must contain digits")
        require_min_length(password, "Password", 6)

        self._accounts.save(Account(email=email, password_hash=generate_password_hash(password)))
        return email

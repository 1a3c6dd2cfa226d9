from __future__ import annotations

from typing import Optional, Protocol

from .model import Account


class AccountRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def save(self, account: Account) -> None:
        raise NotImplementedError

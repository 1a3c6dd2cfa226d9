from __future__ import annotations

from typing import Optional

from ..core.constants import ACCOUNTS_COLLECTION
from ..documents.repository import DocumentRepository
from .model import Account
from .repository import AccountRepository


class DocumentAccountRepository(AccountRepository):
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    def get_by_email(self, email: str) -> Optional[Account]:
        doc = self._documents.get(ACCOUNTS_COLLECTION, email)
        if not doc.exists:
            return None
        return Account(
            email=email,
            password_hash=str(doc.data.get("passwordHash") or ""),
            is_active=bool(doc.data.get("isActive", True)),
        )

    def save(self, account: Account) -> None:
        self._documents.merge(
            ACCOUNTS_COLLECTION,
            account.email,
            {"passwordHash": account.password_hash, "isActive": account.is_active},
        )

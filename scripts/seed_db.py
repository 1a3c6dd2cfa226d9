"""Load demo content and create the demo student logins.

Usage: python scripts/seed_db.py [NUMBER PASSWORD]
With a number and password, only that account's password is (re)set.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from student_portal.accounts.document_account_repository import DocumentAccountRepository
from student_portal.accounts.service import AuthService
from student_portal.database.bootstrap import apply_seed_sql, ensure_demo_students
from student_portal.database.connection import DatabaseConnection
from student_portal.documents.mysql_document_repository import MySQLDocumentRepository
from student_portal.settings import get_settings_module


def main(argv: list[str]) -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    if len(argv) == 2:
        documents = MySQLDocumentRepository(DatabaseConnection.from_dict(db_config))
        email = AuthService(DocumentAccountRepository(documents)).set_password(argv[0], argv[1])
        print(f"OK: password set for {email}")
        return

    apply_seed_sql(db_config)
    numbers = ensure_demo_students(db_config)
    print(
        "OK: seeded "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(students={', '.join(numbers)})"
    )


if __name__ == "__main__":
    main(sys.argv[1:])

from __future__ import annotations

from ..core.exceptions import ResultNotPublished, ValidationError
from .model import ResultSheet
from .repository import ResultRepository


class ResultService:
    def __init__(self, results: ResultRepository):
        self._results = results

    def for_student(self, number: str) -> ResultSheet:
        number = str(number or "").strip()
        if not number:
            raise ValidationError("No mobile number found for this account.")

        sheet = self._results.get_for_number(number)
        if sheet is None:
            raise ResultNotPublished()
        return sheet

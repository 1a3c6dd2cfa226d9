from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from ..common.identity import digits_only


@dataclass(frozen=True)
class HelpContact:
    phone: str
    whatsapp_number: str
    message: str

    @property
    def call_link(self) -> str:
        return f"tel:{self.phone}"

    @property
    def whatsapp_link(self) -> str:
        return f"https://wa.me/{self.whatsapp_number}?text={quote(self.message, safe='')}"

    def to_dict(self) -> dict:
        return {
            "phone": self.phone,
            "whatsappNumber": self.whatsapp_number,
            "callLink": self.call_link,
            "whatsappLink": self.whatsapp_link,
        }


class HelpDeskService:
    def __init__(self, *, phone: str, country_code: str, message: str):
        phone = digits_only(phone)
        self._contact = HelpContact(
            phone=phone,
            whatsapp_number=f"{digits_only(country_code)}{phone}",
            message=message,
        )

    def contact(self) -> HelpContact:
        return self._contact

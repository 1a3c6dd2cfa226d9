from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_BANNER_ORDER

_URL_WRAPPER = re.compile(r"<url.*?>|</url>")


def clean_url(value: Any) -> str:
    """Strip accidental ``<url ...>`` wrappers and whitespace."""
    return _URL_WRAPPER.sub("", str(value if value is not None else "")).strip()


def _order(value: Any) -> float:
    if isinstance(value, bool):
        return DEFAULT_BANNER_ORDER
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value if value is not None else DEFAULT_BANNER_ORDER)
    except (TypeError, ValueError):
        return DEFAULT_BANNER_ORDER


@dataclass(frozen=True)
class Banner:
    id: str
    title: str
    image_url: str
    link: str
    order: float = DEFAULT_BANNER_ORDER
    is_active: bool = True

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Banner":
        active = data.get("isActive")
        return cls(
            id=doc_id,
            title=str(data.get("title") or ""),
            image_url=clean_url(data.get("imageUrl")),
            link=clean_url(data.get("link")),
            order=_order(data.get("order")),
            is_active=active is True or active == "TRUE",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "imageUrl": self.image_url,
            "link": self.link,
            "order": self.order,
        }


@dataclass(frozen=True)
class Announcement:
    id: str
    title: str
    message: str
    date: str
    image_url: Optional[str] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Announcement":
        image = clean_url(data.get("imageUrl"))
        return cls(
            id=doc_id,
            title=str(data.get("title") or ""),
            message=str(data.get("message") or ""),
            date=str(data.get("date") or ""),
            image_url=image or None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "date": self.date,
            "imageUrl": self.image_url,
        }

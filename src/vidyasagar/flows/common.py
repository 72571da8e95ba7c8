"""Field types shared by several features."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator
from pydantic_core import PydanticCustomError

Language = Literal["English", "Bengali", "Mixed Bangla-English"]
Difficulty = Literal["easy", "medium", "hard"]

TOPIC_MIN_LENGTH = 3

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_iso_date(value: Any) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise PydanticCustomError("date_format", "Date must be a YYYY-MM-DD string")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise PydanticCustomError("date_format", "Invalid calendar date: {reason}", {"reason": str(exc)}) from exc


IsoDate = Annotated[date, BeforeValidator(_parse_iso_date)]


def needs_bengali_script(language: str) -> bool:
    return language != "English"

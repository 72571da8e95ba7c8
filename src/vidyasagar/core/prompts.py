"""Prompt templates built from ordered sections.

A template is a pure function from a validated request to a list of section
strings. Empty sections are dropped and the rest are joined with a blank
line, so conditional blocks disappear without leaving gaps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from pydantic import BaseModel

DEFAULT_LIST_DELIMITER = ", "

SectionBuilder = Callable[[Any, str], List[Optional[str]]]


def when(condition: Any, text: str) -> Optional[str]:
    """Return ``text`` if ``condition`` is truthy, otherwise None."""
    return text if condition else None


def join_items(items: Iterable[Any], delimiter: str = DEFAULT_LIST_DELIMITER) -> str:
    return delimiter.join(str(item) for item in items)


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    build: SectionBuilder
    separator: str = "\n\n"

    def sections(self, request: BaseModel, delimiter: str = DEFAULT_LIST_DELIMITER) -> List[str]:
        return [s.strip() for s in self.build(request, delimiter) if s and s.strip()]

    def render(self, request: BaseModel, delimiter: str = DEFAULT_LIST_DELIMITER) -> str:
        return self.separator.join(self.sections(request, delimiter))

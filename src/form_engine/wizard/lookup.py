from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class MemberOption(BaseModel):
    id: str
    name: str


class MemberPage(BaseModel):
    items: List[MemberOption] = Field(default_factory=list)
    total: Optional[int] = None


class MemberSource(Protocol):
    def fetch_page(self, page: int, limit: int) -> MemberPage: ...


class MemberLookup:
    """
    Read-only id -> display name table over an externally paginated member list.

    Committee rows store member ids; the lookup only supplies select options and
    names for display, it never writes back.
    """

    def __init__(self, source: MemberSource, *, page_size: int = 100) -> None:
        self._source = source
        self._page_size = max(1, int(page_size))
        self._entries: Dict[str, MemberOption] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, limit: Optional[int] = None) -> List[MemberOption]:
        """Pull pages (1-based) until `limit` entries are known or the source runs dry."""
        cap = self._page_size if limit is None else max(0, int(limit))
        page = 1
        while len(self._entries) < cap:
            result = self._source.fetch_page(page, self._page_size)
            items = list(result.items or [])
            before = len(self._entries)
            for item in items:
                if len(self._entries) >= cap:
                    break
                self._entries.setdefault(item.id, item)
            if len(items) < self._page_size:
                break
            # A full page of already-known ids means the source is not advancing.
            if len(self._entries) == before:
                break
            if result.total is not None and page * self._page_size >= result.total:
                break
            page += 1
        self._loaded = True
        logger.debug("member lookup loaded %d entries over %d page(s)", len(self._entries), page)
        return list(self._entries.values())

    def options(self) -> List[str]:
        return list(self._entries.keys())

    def display_name(self, member_id: str) -> str:
        entry = self._entries.get(member_id)
        return entry.name if entry is not None else member_id

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._entries

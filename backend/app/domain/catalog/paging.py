"""Pager: page-number parsing, page math and the page-link window."""

from __future__ import annotations

from typing import Any, Optional

from app.domain.common.query import PageSpec


def parse_page_number(raw: Any) -> int:
    """Parse a requested page; unparseable or < 1 becomes 1.

    There is deliberately no upper clamp: a page past the end is valid and
    simply has no rows.
    """
    if isinstance(raw, (list, tuple)):
        raw = raw[0] if raw else None
    if isinstance(raw, bool) or raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    return page if page >= 1 else 1


def page_spec(raw_page: Any, per_page: int) -> PageSpec:
    return PageSpec(page=parse_page_number(raw_page), per_page=per_page)


def total_pages(total: int, per_page: int) -> int:
    """``ceil(total / per_page)``; 0 when there are no rows."""
    if per_page <= 0 or total <= 0:
        return 0
    return (total + per_page - 1) // per_page


def page_window(current: int, pages: int, max_visible: int = 7) -> list[Optional[int]]:
    """Page numbers to show as links, with ``None`` where pages are elided.

    Small result sets list every page.  Larger ones always show the first
    and last page plus two pages either side of *current*.
    """
    if pages <= 0:
        return []
    if pages <= max_visible:
        return list(range(1, pages + 1))

    window: list[Optional[int]] = [1]
    start = max(2, current - 2)
    end = min(pages - 1, current + 2)
    if start > 2:
        window.append(None)
    window.extend(range(start, end + 1))
    if end < pages - 1:
        window.append(None)
    window.append(pages)
    return window


__all__ = ["parse_page_number", "page_spec", "total_pages", "page_window"]

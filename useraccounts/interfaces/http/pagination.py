# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Sorting and page-link helpers for list endpoints."""

from __future__ import annotations

import math
from urllib.parse import urlencode

from useraccounts.domain.users.repositories import SORTABLE_FIELDS, SortField

DEFAULT_SORT = "-created_at"


def parse_sort(value: str | None) -> list[SortField]:
    """Parse ``"last_name,-dob"`` into sort fields; ``-`` means descending."""
    raw = value if value else DEFAULT_SORT
    fields: list[SortField] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        descending = part.startswith("-")
        name = part.lstrip("+-")
        if name not in SORTABLE_FIELDS:
            raise ValueError(
                f"Cannot sort by '{name}', allowed fields: {', '.join(sorted(SORTABLE_FIELDS))}"
            )
        fields.append(SortField(field=name, descending=descending))
    if not fields:
        raise ValueError("sortBy must name at least one field")
    return fields


def build_page_links(
    base_url: str,
    params: dict[str, str],
    page: int,
    page_size: int,
    total: int,
) -> str:
    last = max(math.ceil(total / page_size), 1)

    def _link(target: int, rel: str) -> str:
        query = urlencode({**params, "page": target, "itemsPerPage": page_size})
        return f'<{base_url}?{query}>; rel="{rel}"'

    links = [_link(1, "first")]
    if page > 1:
        links.append(_link(min(page - 1, last), "prev"))
    if page < last:
        links.append(_link(page + 1, "next"))
    links.append(_link(last, "last"))
    return ", ".join(links)


__all__ = ["DEFAULT_SORT", "build_page_links", "parse_sort"]

"""Pagination helpers for list endpoints."""

from __future__ import annotations

import math

from flask import current_app

MAX_PER_PAGE = 200


def page_args(args) -> tuple[int, int]:
    """Read page/per_page from request args, clamped to sane bounds."""
    default = current_app.config.get("DEFAULT_PAGE_SIZE", 50)
    try:
        page = int(args.get("page", 1))
        per_page = int(args.get("per_page", default))
    except (TypeError, ValueError):
        page, per_page = 1, default
    return max(page, 1), max(min(per_page, MAX_PER_PAGE), 1)


def page_count(total: int, per_page: int) -> int:
    return math.ceil(total / per_page) if total else 1

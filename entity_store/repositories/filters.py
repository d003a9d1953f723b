"""Pagination and search helpers for entity repository queries."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import or_

DEFAULT_PER_PAGE = 20


@dataclass(frozen=True, slots=True)
class Pagination:
    """1-indexed page window over an ordered result set."""

    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("Pagination.page must be 1 or greater.")
        if self.per_page < 1:
            raise ValueError("Pagination.per_page must be 1 or greater.")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def apply_search(query, model, term: str | None):
    """Case-insensitive substring match over ``name`` OR ``entity_type``.

    A blank term means no search; any other term is matched verbatim.
    """
    if term is None or not term.strip():
        return query
    return query.filter(
        or_(
            model.name.icontains(term, autoescape=True),
            model.entity_type.icontains(term, autoescape=True),
        )
    )


__all__ = ["DEFAULT_PER_PAGE", "Pagination", "apply_search"]

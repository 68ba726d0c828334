"""Pure edits of a stored portfolio. Each returns a new ``Portfolio``."""

from __future__ import annotations

from typing import Any

from ilequity.config.schema import (
    GrantKind,
    Portfolio,
    RSUGrant,
    StockOptionGrant,
    utcnow,
)


def _list_field(kind: GrantKind) -> str:
    return "stock_options" if kind == "option" else "rsus"


def _with(portfolio: Portfolio, **update: Any) -> Portfolio:
    return portfolio.model_copy(update={**update, "last_updated": utcnow()})


def update_personal_info(portfolio: Portfolio, **changes: Any) -> Portfolio:
    """Replace fields of the personal info, re-validating the result."""
    merged = {**portfolio.personal_info.model_dump(), **changes}
    personal_info = type(portfolio.personal_info).model_validate(merged)
    return _with(portfolio, personal_info=personal_info)


def add_grant(portfolio: Portfolio, grant: StockOptionGrant | RSUGrant) -> Portfolio:
    """Append ``grant`` to the list matching its kind."""
    field = _list_field(grant.kind)
    grants = [*getattr(portfolio, field), grant]
    return _with(portfolio, **{field: grants})


def update_grant(
    portfolio: Portfolio, kind: GrantKind, grant_id: str, **changes: Any
) -> Portfolio:
    """Apply ``changes`` to the grant with ``grant_id``, re-validating it.

    Raises:
        KeyError: If no grant of ``kind`` has that id.
    """
    field = _list_field(kind)
    grants = list(getattr(portfolio, field))
    for i, grant in enumerate(grants):
        if grant.id == grant_id:
            grants[i] = type(grant).model_validate({**grant.model_dump(), **changes})
            return _with(portfolio, **{field: grants})
    raise KeyError(grant_id)


def remove_grant(portfolio: Portfolio, kind: GrantKind, grant_id: str) -> Portfolio:
    """Drop the grant with ``grant_id``; unknown ids are a no-op."""
    field = _list_field(kind)
    grants = [g for g in getattr(portfolio, field) if g.id != grant_id]
    return _with(portfolio, **{field: grants})


def reorder_grants(
    portfolio: Portfolio, kind: GrantKind, from_index: int, to_index: int
) -> Portfolio:
    """Move one grant to a new position; order drives result order."""
    field = _list_field(kind)
    grants = list(getattr(portfolio, field))
    grants.insert(to_index, grants.pop(from_index))
    return _with(portfolio, **{field: grants})

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any


def list_response(items: Sequence[Any], limit: int, offset: int) -> dict[str, Any]:
    return {"items": list(items), "count": len(items), "limit": limit, "offset": offset}


class ListResponseMixin:
    """Adds ``list_response`` to services whose ``list`` takes ``limit``/``offset``.

    Arguments are bound against the class's own ``list`` signature, so the
    page reported back is the one requested whether it was passed
    positionally or by keyword.
    """

    def list_response(self, db, *args, **kwargs) -> dict[str, Any]:
        bound = inspect.signature(type(self).list).bind(db, *args, **kwargs)
        bound.apply_defaults()
        items = self.list(db, *args, **kwargs)  # type: ignore[attr-defined]
        return list_response(items, bound.arguments["limit"], bound.arguments["offset"])

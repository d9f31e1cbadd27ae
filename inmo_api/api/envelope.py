"""``{"success": true, ...}`` bodies for the favorites, proposals and leads routes."""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder


def success(data: Any = None, **extra: Any) -> dict[str, Any]:
    """Wrap ``data`` (models included) in the success envelope.

    Extra keyword arguments become top-level keys, e.g. ``removed=True``.
    """

    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = jsonable_encoder(data, by_alias=True)
    body.update(extra)
    return body

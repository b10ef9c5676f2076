"""Local declared state for a reconciled resource."""

from __future__ import annotations

from typing import Any


class ResourceData:
    """Typed key/value view of a resource's declared and computed fields.

    A field that was never set is distinct from a field set to an empty
    value; ``get_ok_exists`` reports the difference.
    """

    def __init__(self, fields: dict[str, Any] | None = None, resource_id: str = ""):
        self._fields: dict[str, Any] = {k: v for k, v in (fields or {}).items() if v is not None}
        self._id = resource_id or ""

    def id(self) -> str:
        """Return the stable external identifier (empty when unknown)."""
        return self._id

    def set_id(self, resource_id: str) -> None:
        self._id = resource_id or ""

    def get(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def get_ok_exists(self, name: str) -> tuple[Any, bool]:
        """Return the value of a field and whether it has been explicitly set."""
        if name in self._fields:
            return self._fields[name], True
        return None, False

    def set(self, name: str, value: Any) -> None:
        if value is None:
            self._fields.pop(name, None)
        else:
            self._fields[name] = value

    def unset(self, name: str) -> None:
        self._fields.pop(name, None)

    def as_dict(self) -> dict[str, Any]:
        """Return a copy of all explicitly set fields."""
        return dict(self._fields)

    def __repr__(self) -> str:
        return f"ResourceData(id={self._id!r}, fields={self._fields!r})"

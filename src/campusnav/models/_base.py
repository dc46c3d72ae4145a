"""Base model for campusnav data.

Every campusnav model inherits from :class:`CampusBaseModel` which
provides:

* Frozen instances, so snapshots are superseded rather than mutated.
* A ``model_validator(mode="before")`` that strips provider sentinel
  values (``""``, ``"--"``, NaN) so the field default is used.
"""

from __future__ import annotations

import math
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator

# Sentinel strings data providers use for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan", "null"})


class CampusBaseModel(BaseModel):
    """Base for campusnav models.

    Handles:
    * sentinel values (``""``, ``"--"``, ``"null"``, NaN) -> dropped so
      the field default is used instead
    * validation aliases such as ``lat``/``lng`` via ``populate_by_name``
    """

    _LITERAL_FIELDS: ClassVar[frozenset[str]] = frozenset()
    """Fields holding user-visible text, where ``"NaN"`` or ``"null"`` is a real value.

    Only ``None`` is dropped for these.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any], literal_fields: frozenset[str] = frozenset()) -> dict[str, Any]:
        """Return *values* without ``None`` or sentinel entries."""
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if key not in literal_fields:
                if isinstance(value, str) and value.strip() in _SENTINELS:
                    continue
                if isinstance(value, float) and math.isnan(value):
                    continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return CampusBaseModel._clean_dict(values, cls._LITERAL_FIELDS)

"""Base model for pyfuel records.

Every record returned by the data API inherits from :class:`FuelBaseModel`
which provides:

* frozen instances, so cached snapshots can be shared between controllers
  without defensive copies;
* ``extra="ignore"`` so columns added to the backend do not break parsing;
* a ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used instead.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class FuelBaseModel(BaseModel):
    """Base for pyfuel API records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}

"""
This module defines the base Pydantic model shared by the queryspec schemas.

`_QueryspecModel` generates camelCase aliases for every field so request and
configuration payloads can be written in either camelCase or snake_case.
"""

from __future__ import annotations

from humps import camelize
from pydantic import BaseModel, ConfigDict


class _QueryspecModel(BaseModel):
    """
    A base Pydantic model for all queryspec schemas.

    - `model_config`: camelCase aliases, population by field name as well as by
      alias, and creation from plain objects.
    - `merge` for layering one schema instance over another.
    """

    model_config = ConfigDict(
        alias_generator=camelize,
        populate_by_name=True,
        from_attributes=True,
    )

    def merge(self, source_model_instance: _QueryspecModel, replace_null: bool = False) -> None:
        """
        Merges field values from `source_model_instance` into this instance, in place.

        Args:
            source_model_instance: The model to copy values from.
            replace_null (bool, optional): If True, `None` values from the source overwrite
                existing values. Defaults to False.
        """
        for field_name in type(source_model_instance).model_fields:
            source_value = getattr(source_model_instance, field_name)
            if field_name in type(self).model_fields:
                if source_value is not None or replace_null:
                    setattr(self, field_name, source_value)

"""Base Pydantic schema for the project.

Provides a common base class for all Pydantic models in the behavior-evaluator
package with shared configuration and validation behavior.
"""

from pydantic import BaseModel, ConfigDict

__all__ = ["BaseSchema", "FrozenSchema"]


class BaseSchema(BaseModel):
    """Base model for all Pydantic schemas.

    Provides common configuration for all models in the project:
    - from_attributes: Build models from arbitrary objects with matching attributes
    - str_strip_whitespace: Automatically strip whitespace from strings
    - populate_by_name: Accept field names as well as transcript aliases
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class FrozenSchema(BaseSchema):
    """Immutable variant of BaseSchema.

    Used for records that must not change once produced: timeline events,
    violations, and evaluation results.
    """

    model_config = ConfigDict(frozen=True)

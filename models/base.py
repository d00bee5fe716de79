"""
Base schemas for all models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class SnapshotSchema(BaseSchema):
    """
    Base for snapshot entities.

    Frozen: a snapshot is replaced as a whole, never edited field by field.
    Use model_copy(update=...) to derive a changed view.

    Strings are stored as given; the builder trims names and size labels.
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=False,
        frozen=True
    )

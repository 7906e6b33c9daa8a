"""Column type helpers shared across model modules."""

from sqlalchemy import Enum


def enum_type(enum_cls, *, name: str) -> Enum:
    """Store Python str-enums by value, portable across PostgreSQL and SQLite."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )

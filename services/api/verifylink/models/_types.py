"""Column helpers shared by the models."""

from enum import Enum as PyEnum
from uuid import uuid4

from sqlalchemy import Enum


def generate_id() -> str:
    """Generate an opaque public identifier."""
    return str(uuid4())


def status_column_type(enum_cls: type[PyEnum], name: str) -> Enum:
    """VARCHAR-backed enum storing the member values (e.g. "pending")."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )

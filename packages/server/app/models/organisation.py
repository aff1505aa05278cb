"""Organisation model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Organisation(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organisations"

    name: str = Field(nullable=False, index=True)
    description: Optional[str] = None

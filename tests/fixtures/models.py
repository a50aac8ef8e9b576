"""SQLAlchemy models used by the query source and integration tests."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for test models."""


class Widget(Base):
    """Model with an integer PK and a non-unique timestamp for composite ordering."""

    __tablename__ = "widgets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    enabled_at: Mapped[datetime] = mapped_column(DateTime)
    name: Mapped[str] = mapped_column(String(50))


class Membership(Base):
    """Model with a composite primary key (not supported by SelectQuerySource)."""

    __tablename__ = "memberships"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(Integer, primary_key=True)

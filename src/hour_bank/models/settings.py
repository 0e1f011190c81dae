"""Editable picklists (companies, teams)."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from hour_bank.models.base import Base, TimestampMixin


class AppSetting(Base, TimestampMixin):
    """A named picklist entry. Names are not required to be unique."""

    __tablename__ = "app_setting"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: str(uuid4()))
    kind: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        CheckConstraint("kind IN ('company', 'team')", name="app_setting_kind_check"),
    )

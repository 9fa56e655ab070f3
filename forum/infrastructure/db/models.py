# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum.infrastructure.db.session import Base


class User(Base):
    __tablename__ = "users"
    unique_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(254), unique=True, nullable=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    password_salt: Mapped[str] = mapped_column(String(128), nullable=False)
    registration_datetime: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    authentication_keys: Mapped[list["AuthenticationKey"]] = relationship(
        "AuthenticationKey",
        back_populates="user",
        cascade="all,delete",
        passive_deletes=True,
    )


class AuthenticationKey(Base):
    __tablename__ = "authentication_keys"
    unique_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.unique_id", ondelete="CASCADE"), index=True, nullable=False
    )
    # Not unique: lookups tolerate duplicate rows for the same key.
    authentication_key: Mapped[str] = mapped_column(String(256), index=True, nullable=False)
    expiration: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    user: Mapped["User"] = relationship("User", back_populates="authentication_keys")

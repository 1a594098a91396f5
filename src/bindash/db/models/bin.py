from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bindash.db.session import Base, CreatedAtMixin, TimestampMixin
from bindash.domain.enums import BinStatus, CollectionStatus


class Bin(TimestampMixin, Base):
    """A physical waste bin with its last reported fill state."""

    __tablename__ = "bins"

    id: Mapped[int] = mapped_column("bin_id", Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), unique=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    status: Mapped[str] = mapped_column(String(20), default=BinStatus.EMPTY.value)
    fill_level: Mapped[Optional[int]] = mapped_column(Integer, default=None)  # percent
    status_updated_at: Mapped[Optional[datetime]] = mapped_column(default=None)


class Collection(CreatedAtMixin, Base):
    """One pickup of one bin."""

    __tablename__ = "collections"

    id: Mapped[int] = mapped_column("collection_id", Integer, primary_key=True, autoincrement=True)
    bin_id: Mapped[int] = mapped_column(ForeignKey("bins.bin_id"), index=True)
    collected_by: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    status: Mapped[str] = mapped_column(String(20), default=CollectionStatus.SCHEDULED.value)
    collection_date: Mapped[Optional[datetime]] = mapped_column(default=None)
    notes: Mapped[Optional[str]] = mapped_column(Text, default=None)

    bin: Mapped["Bin"] = relationship(lazy="joined")

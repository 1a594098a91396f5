from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bindash.db.session import Base, CreatedAtMixin


class Admin(CreatedAtMixin, Base):
    """Dashboard administrator. Reports reference it through generated_by."""

    __tablename__ = "admins"

    id: Mapped[int] = mapped_column("admin_id", Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    is_active: Mapped[bool] = mapped_column(default=True)

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wms.db.base import Base


class Role(Base):
    """Named role; ``permissions`` holds a JSON list of ``resource:action`` strings."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)
    permissions: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

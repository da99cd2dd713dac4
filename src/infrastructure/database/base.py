"""SQLAlchemy declarative base and common model fields.

Key components:
- **Naming conventions**: Standardized constraint names for migrations
- **Base class**: Configured declarative base with metadata
- **BaseModel**: Abstract model with the integer identity key and the
  soft-delete flag shared by every table
"""

from sqlalchemy import Boolean, Integer, MetaData, false
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.infrastructure.constants import NAMING_CONVENTION


class Base(DeclarativeBase):
    """SQLAlchemy declarative base with naming conventions."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class BaseModel(Base):
    """Abstract base model with the columns every table carries.

    - ``id``: integer identity primary key
    - ``is_deleted``: soft-delete flag, false for new rows
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Primary key with auto-incrementing integer ID",
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
        doc="Soft-delete flag; rows stay readable after being flagged",
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

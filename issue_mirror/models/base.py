"""Base SQLAlchemy model with common functionality."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class MirrorModel(Base):
    """Base model for mirrored rows.

    Mirrored rows carry the remote system's identity, so unlike a typical
    application model there is no generated primary key or bookkeeping
    timestamp here.
    """

    __abstract__ = True

    def __repr__(self) -> str:
        """Return string representation of the model."""
        keys = ", ".join(
            f"{column.name}={getattr(self, column.key)!r}"
            for column in self.__table__.primary_key.columns
        )
        return f"<{self.__class__.__name__}({keys})>"

from datetime import datetime

from sqlalchemy import Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from rolewallet.db.types import UTCDateTime


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, server_default=func.now(), comment="Row creation time."
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
        comment="Time of the last row update.",
    )


class AuditMixin(TimestampMixin):
    created_by: Mapped[None | int] = mapped_column(
        Integer, nullable=True, comment="ID of the account that created this row, if any."
    )

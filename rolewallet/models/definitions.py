from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rolewallet.core.roles import Role
from rolewallet.db.types import Money, UTCDateTime

from .base import AuditMixin, Base


class AccountStatus(str, PyEnum):
    ACTIVATED = "Activated"
    DEACTIVATED = "Deactivated"
    BANNED = "Banned"


# --- CORE IDENTITY ENTITY ---


class Account(Base, AuditMixin):
    """
    The Account Table (T_Account).
    Every principal of the platform (admins, agents and end users) is one row,
    distinguished only by its role.

    The balance is mutated exclusively through conditional UPDATE statements
    issued by the transfer service; it is never assigned from Python.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, comment="Unique Account ID.")

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
        comment="Login name. Stored trimmed; unique ignoring case.",
    )
    email: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True, comment="Unique email address, exact-match login."
    )
    fullname: Mapped[None | str] = mapped_column(String(255), nullable=True, comment="Display name.")

    password_hash: Mapped[str] = mapped_column(String(128), nullable=False, comment="bcrypt hash of the password.")

    role: Mapped[Role] = mapped_column(
        String(20), nullable=False, index=True, comment="Position in the role hierarchy (e.g., 'Agent')."
    )
    balance: Mapped[Decimal] = mapped_column(
        Money(), nullable=False, default=Decimal("0"), comment="Current balance in ten-thousandths (4 decimal places)."
    )
    status: Mapped[AccountStatus] = mapped_column(
        String(20), nullable=False, default=AccountStatus.ACTIVATED, comment="Activated, Deactivated or Banned."
    )

    joined_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, comment="Signup time.")
    last_login: Mapped[None | datetime] = mapped_column(
        UTCDateTime(), nullable=True, comment="Time of the last successful login; NULL means never."
    )

"""
Pydantic schemas defining the contract for account identity, authentication
and status management across the presentation and service layers.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from pydantic import BaseModel, EmailStr, Field

from rolewallet.core.roles import Role
from rolewallet.models.definitions import AccountStatus

# --- Input Schemas (Requests / Commands) ---


class AccountRequest(BaseModel):
    """
    Schema for account creation, used both by public signup (role is forced
    to User) and by admin-creation (role must sit below the creator).
    """

    username: str = Field(..., min_length=1, max_length=50, description="Unique login name")
    email: EmailStr = Field(..., description="Unique email address")
    fullname: str | None = Field(default=None, max_length=255, description="Full display name")

    # Optional here so a missing password surfaces as a service ValidationError
    password: str | None = Field(default=None, description="Plain password (will be hashed)")

    role: Role = Field(default=Role.USER, description="Role in the hierarchy")


class ProfileRequest(BaseModel):
    """
    Schema for profile updates. Every field is optional; an empty or absent
    password leaves the stored one untouched.
    """

    username: str | None = Field(default=None, min_length=1, max_length=50, description="New login name")
    email: EmailStr | None = Field(default=None, description="New email address")
    fullname: str | None = Field(default=None, max_length=255, description="New display name")
    password: str | None = Field(default=None, description="New password; empty means unchanged")
    role: Role | None = Field(default=None, description="New role; must stay below the editor")


class PasswordChangeRequest(BaseModel):
    """
    Schema for changing one's own password (requires old password verification).
    """

    old_password: str = Field(..., description="Current password for verification")
    new_password: str = Field(..., min_length=8, description="New password (minimum 8 characters)")


class LoginField(str, PyEnum):
    EMAIL = "email"
    USERNAME = "username"


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=1, description="Email or username, depending on the entry point")
    password: str = Field(..., description="Plain text password")


class StatusAction(str, PyEnum):
    ACTIVATE = "Activate"
    DEACTIVATE = "Deactivate"

    @property
    def target_status(self) -> AccountStatus:
        return AccountStatus.ACTIVATED if self is StatusAction.ACTIVATE else AccountStatus.DEACTIVATED


# --- Output Schemas (Responses / Domain Objects) ---


class AccountResponse(BaseModel):
    """
    Response schema for account information. Never carries the password or
    its hash.
    """

    model_config = {"from_attributes": True}

    id: int = Field(..., description="Account ID")
    username: str = Field(..., description="Login name")
    email: str = Field(..., description="Email address")
    fullname: str | None = Field(default=None, description="Full display name")
    role: Role = Field(..., description="Role in the hierarchy")
    balance: Decimal = Field(..., description="Current balance")
    status: AccountStatus = Field(..., description="Activated, Deactivated or Banned")
    joined_at: datetime = Field(..., description="Signup time")
    last_login: datetime | None = Field(default=None, description="Last successful login; None means never")
    created_by: int | None = Field(default=None, description="ID of the creating admin, if any")


class StatusResponse(BaseModel):
    id: int = Field(..., description="Account ID")
    status: AccountStatus = Field(..., description="Status after the change")

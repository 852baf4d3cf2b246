from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rolewallet.core.clock import Clock
from rolewallet.core.roles import Role, can_modify, parse_role
from rolewallet.core.security.password import DEFAULT_ROUNDS, check_password, hash_password
from rolewallet.exceptions.http import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
    ValidationError,
)
from rolewallet.logging_config import get_logger
from rolewallet.models.definitions import Account, AccountStatus
from rolewallet.repositories import AccountRepository
from rolewallet.schemas import (
    AccountRequest,
    AccountResponse,
    LoginField,
    LoginRequest,
    PasswordChangeRequest,
    ProfileRequest,
)

logger = get_logger("services.account")


class AccountService:
    def __init__(
        self,
        session: AsyncSession,
        account_repo: AccountRepository,
        clock: Clock,
        password_rounds: int = DEFAULT_ROUNDS,
    ):
        self._session = session
        self._account_repo = account_repo
        self._clock = clock
        self._password_rounds = password_rounds

    # --- 1. ACCOUNT CREATION (Atomic Operation) ---

    async def register(self, data: AccountRequest) -> AccountResponse:
        """Public signup. The requested role is ignored; signups are always Users."""
        data = data.model_copy(update={"role": Role.USER})
        create_data = self._prepare_create_data(data)

        async with self._session.begin():
            created = await self._insert(create_data)
            response = AccountResponse.model_validate(created)

        logger.info("account_registered", extra={"account_id": response.id})
        return response

    async def create_account(self, creator_id: int, data: AccountRequest) -> AccountResponse:
        """
        Admin-creation of an account. The creator must be active and strictly
        senior to the role being created.
        """
        create_data = self._prepare_create_data(data)

        async with self._session.begin():
            creator = await self._account_repo.get_by_id(creator_id)
            if not creator:
                raise NotFoundError("Account not found.")
            if creator.status != AccountStatus.ACTIVATED or not can_modify(creator.role, data.role):
                logger.warning(
                    "account_create_denied",
                    extra={"creator_id": creator_id, "creator_role": creator.role, "requested_role": data.role},
                )
                raise PermissionDeniedError("Not allowed to create an account with this role.")

            create_data["created_by"] = creator.id
            created = await self._insert(create_data)
            response = AccountResponse.model_validate(created)

        logger.info(
            "account_created", extra={"account_id": response.id, "creator_id": creator_id, "role": response.role}
        )
        return response

    def _prepare_create_data(self, data: AccountRequest) -> dict[str, Any]:
        username = data.username.strip()
        if not username:
            raise ValidationError("Username is required.")
        if not data.password:
            raise ValidationError("Password is required.")

        return {
            "username": username,
            "email": data.email,
            "fullname": data.fullname,
            "password_hash": self._hash(data.password),
            "role": parse_role(data.role),
            "status": AccountStatus.ACTIVATED,
            "joined_at": self._clock.now(),
            "last_login": None,
            "created_by": None,
        }

    async def _insert(self, create_data: dict[str, Any]) -> Account:
        await self._ensure_unique(create_data["email"], create_data["username"])
        try:
            return await self._account_repo.create(create_data)
        except IntegrityError:
            # Lost a race against a concurrent signup with the same identity
            raise ConflictError("Email or username already registered.") from None

    async def _ensure_unique(self, email: str | None, username: str | None, exclude_id: int | None = None) -> None:
        if email is not None:
            existing = await self._account_repo.get_by_email(email)
            if existing and existing.id != exclude_id:
                raise ConflictError("Email already registered.")
        if username is not None:
            existing = await self._account_repo.get_by_username(username)
            if existing and existing.id != exclude_id:
                raise ConflictError("Username already taken.")

    def _hash(self, password: str) -> str:
        try:
            return hash_password(password, rounds=self._password_rounds)
        except ValueError as exc:
            raise ValidationError(str(exc)) from None

    # --- 2. AUTHENTICATION ---

    async def login(self, credentials: LoginRequest, by: LoginField = LoginField.EMAIL) -> AccountResponse:
        """
        Authenticates by exact email or by trimmed, case-insensitive username
        and stamps ``last_login``.

        Unknown identifiers, wrong passwords and inactive accounts all fail
        with the same InvalidCredentialsError.
        """
        async with self._session.begin():
            if by is LoginField.EMAIL:
                account = await self._account_repo.get_by_email(credentials.identifier)
            else:
                account = await self._account_repo.get_by_username(credentials.identifier)

            if (
                not account
                or not check_password(credentials.password, account.password_hash)
                or account.status != AccountStatus.ACTIVATED
            ):
                logger.warning("login_failed", extra={"login_field": by})
                raise InvalidCredentialsError()

            await self._account_repo.touch_last_login(account, self._clock.now())
            response = AccountResponse.model_validate(account)

        logger.info("login_succeeded", extra={"account_id": response.id})
        return response

    async def change_password(self, account_id: int, data: PasswordChangeRequest) -> bool:
        """Changes an account's own password after verifying the current one."""
        new_hash = self._hash(data.new_password)

        async with self._session.begin():
            account = await self._account_repo.get_by_id(account_id)
            if not account or not check_password(data.old_password, account.password_hash):
                raise InvalidCredentialsError()
            await self._account_repo.update(account, {"password_hash": new_hash})

        logger.info("password_changed", extra={"account_id": account_id})
        return True

    # --- 3. PROFILE MANAGEMENT ---

    async def update_profile(self, editor_id: int | None, target_id: int, data: ProfileRequest) -> bool:
        """
        Updates another account's profile. The editor must be strictly senior
        to the target, and a role change must also land below the editor.
        """
        if editor_id is None:
            raise UnauthorizedError("Editor identity is required.")

        update_data = data.model_dump(exclude_none=True)
        password = update_data.pop("password", None)
        if password:
            update_data["password_hash"] = self._hash(password)
        if "username" in update_data:
            update_data["username"] = update_data["username"].strip()
            if not update_data["username"]:
                raise ValidationError("Username must not be blank.")

        async with self._session.begin():
            editor = await self._account_repo.get_by_id(editor_id)
            target = await self._account_repo.get_by_id(target_id)
            if not editor or not target:
                raise NotFoundError("Account not found.")

            if editor.status != AccountStatus.ACTIVATED or not can_modify(editor.role, target.role):
                logger.warning(
                    "profile_update_denied",
                    extra={"editor_id": editor_id, "target_id": target_id, "editor_role": editor.role},
                )
                raise PermissionDeniedError("Not allowed to edit this account.")
            if "role" in update_data and not can_modify(editor.role, update_data["role"]):
                raise PermissionDeniedError("Not allowed to assign this role.")

            await self._ensure_unique(update_data.get("email"), update_data.get("username"), exclude_id=target.id)

            try:
                changed = await self._account_repo.update(target, update_data)
            except IntegrityError:
                # Lost a race against a concurrent write of the same identity
                raise ConflictError("Email or username already registered.") from None
            if not changed:
                raise ConflictError("No changes to apply.")

        logger.info("profile_updated", extra={"editor_id": editor_id, "target_id": target_id, "fields": sorted(changed)})
        return True

    # --- 4. LOOKUPS ---

    async def get_account(self, account_id: int) -> AccountResponse:
        async with self._session.begin():
            account = await self._account_repo.get_by_id(account_id)
            if not account:
                raise NotFoundError("Account not found.")
            return AccountResponse.model_validate(account)

    async def get_by_email(self, email: str) -> AccountResponse:
        async with self._session.begin():
            account = await self._account_repo.get_by_email(email)
            if not account:
                raise NotFoundError("Account not found.")
            return AccountResponse.model_validate(account)

    async def list_accounts(self, role: Role | None = None, limit: int = 100) -> Sequence[AccountResponse]:
        if limit < 1:
            raise ValidationError("Limit must be positive.")
        async with self._session.begin():
            accounts = await self._account_repo.list_accounts(role=role, limit=limit)
            return [AccountResponse.model_validate(a) for a in accounts]

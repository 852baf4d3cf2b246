from sqlalchemy.ext.asyncio import AsyncSession

from rolewallet.core.roles import Role, downstream, is_mother_admin, parse_role
from rolewallet.exceptions.http import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from rolewallet.logging_config import get_logger
from rolewallet.models.definitions import AccountStatus
from rolewallet.repositories import AccountRepository
from rolewallet.schemas import StatusAction, StatusResponse

logger = get_logger("services.status")


class StatusService:
    """
    Activate / deactivate / ban, gated by the role hierarchy.

    The actor is identified by role only; the caller is responsible for having
    authenticated it. A status write only happens when the status actually
    changes, so a repeated request is reported as a conflict and writes
    nothing.
    """

    def __init__(self, session: AsyncSession, account_repo: AccountRepository):
        self._session = session
        self._account_repo = account_repo

    async def set_status(self, actor_role: str | Role, target_id: int, action: StatusAction) -> StatusResponse:
        actor = parse_role(actor_role)
        try:
            desired = StatusAction(action).target_status
        except ValueError:
            raise ValidationError(f"Unknown status action: {action!r}") from None

        async with self._session.begin():
            target = await self._account_repo.get_by_id(target_id)
            if not target:
                raise NotFoundError("Account not found.")

            target_role = parse_role(target.role)
            allowed = is_mother_admin(actor) or target_role in downstream(actor)
            # Lifting or altering a ban is reserved to Mother Admin
            if target.status == AccountStatus.BANNED and not is_mother_admin(actor):
                allowed = False
            if not allowed:
                logger.warning(
                    "status_change_denied",
                    extra={"actor_role": actor, "target_id": target_id, "target_role": target_role, "action": action},
                )
                raise PermissionDeniedError("Not allowed to change the status of this account.")

            if not await self._account_repo.set_status(target.id, desired):
                raise ConflictError(f"Account is already {desired.value}.")

        logger.info("status_changed", extra={"actor_role": actor, "target_id": target_id, "status": desired})
        return StatusResponse(id=target_id, status=desired)

    async def ban(self, actor_role: str | Role, target_id: int) -> StatusResponse:
        if not is_mother_admin(actor_role):
            logger.warning("ban_denied", extra={"actor_role": actor_role, "target_id": target_id})
            raise PermissionDeniedError("Only Mother Admin can ban accounts.")

        async with self._session.begin():
            target = await self._account_repo.get_by_id(target_id)
            if not target:
                raise NotFoundError("Account not found.")
            if not await self._account_repo.set_status(target.id, AccountStatus.BANNED):
                raise ConflictError("Account is already Banned.")

        logger.info("account_banned", extra={"target_id": target_id})
        return StatusResponse(id=target_id, status=AccountStatus.BANNED)

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from rolewallet.core.clock import Clock
from rolewallet.core.roles import Role, can_transfer_to, parse_role
from rolewallet.db.types import MONEY_PRECISION, MONEY_SCALE
from rolewallet.exceptions.http import (
    InsufficientFundsError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from rolewallet.logging_config import LogContext, get_logger
from rolewallet.models.definitions import AccountStatus
from rolewallet.models.ledger import TransactionLog, TransferDirection
from rolewallet.repositories import AccountRepository, LedgerRepository
from rolewallet.schemas import AccountResponse, TransactionResponse, TransferRequest

logger = get_logger("services.transfer")


def validate_amount(amount: Decimal) -> Decimal:
    """
    Checks that ``amount`` is a positive, finite decimal that fits the money
    columns (at most 4 decimal places, 14 digits overall).
    """
    if isinstance(amount, int) and not isinstance(amount, bool):
        amount = Decimal(amount)
    if not isinstance(amount, Decimal):
        raise ValidationError("Amount must be a decimal value.")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be a positive, finite number.")

    _, digits, exponent = amount.normalize().as_tuple()
    if exponent < -MONEY_SCALE:
        raise ValidationError(f"Amount supports at most {MONEY_SCALE} decimal places.")
    if len(digits) + exponent > MONEY_PRECISION - MONEY_SCALE:
        raise ValidationError("Amount is too large.")
    return amount


class TransferService:
    """
    Moves balance between accounts under the role hierarchy and records every
    completed transfer in the ledger.

    Each transfer is one database transaction: the conditional debit of the
    payer, the credit of the payee and the ledger append commit or roll back
    together.
    """

    def __init__(
        self,
        session: AsyncSession,
        account_repo: AccountRepository,
        ledger_repo: LedgerRepository,
        clock: Clock,
    ):
        self._session = session
        self._account_repo = account_repo
        self._ledger_repo = ledger_repo
        self._clock = clock

    # --- 1. TRANSFER ENGINE (Atomic Operation) ---

    async def transfer(self, actor_id: int, data: TransferRequest) -> TransactionResponse:
        """
        ``add``: the actor pays the target. ``minus``: the target pays the
        actor, which must be a Mother Admin (claw-back).

        Raises:
            ValidationError: bad amount, self-transfer, or an unknown role on
                either account.
            NotFoundError: actor or target does not exist.
            PermissionDeniedError: the hierarchy forbids the transfer or the
                actor is not active.
            InsufficientFundsError: the paying account cannot cover the amount.
        """
        amount = validate_amount(data.amount)
        direction = TransferDirection(data.direction)
        if actor_id == data.target_id:
            raise ValidationError("An account cannot transfer to itself.")

        with LogContext.bind(actor_id=str(actor_id)):
            # --- START ATOMIC TRANSACTION ---
            async with self._session.begin():
                actor = await self._account_repo.get_by_id(actor_id)
                target = await self._account_repo.get_by_id(data.target_id)
                if not actor or not target:
                    raise NotFoundError("Account not found.")

                actor_role = parse_role(actor.role)
                target_role = parse_role(target.role)

                if actor.status != AccountStatus.ACTIVATED:
                    raise PermissionDeniedError("Inactive accounts cannot transfer.")

                if direction is TransferDirection.MINUS:
                    if actor_role is not Role.MOTHER_ADMIN:
                        logger.warning("transfer_denied", extra={"reason": "minus_not_mother_admin"})
                        raise PermissionDeniedError("Only Mother Admin can deduct balance.")
                    payer, payee = target, actor
                else:
                    if not can_transfer_to(actor_role, target_role):
                        logger.warning(
                            "transfer_denied",
                            extra={"reason": "outside_downstream", "actor_role": actor_role, "target_role": target_role},
                        )
                        raise PermissionDeniedError("Not allowed to transfer to this account.")
                    payer, payee = actor, target

                if await self._account_repo.debit_if_sufficient(payer.id, amount) is None:
                    logger.warning("transfer_insufficient_funds", extra={"payer_id": payer.id, "amount": amount})
                    raise InsufficientFundsError("Insufficient balance.")
                await self._account_repo.credit(payee.id, amount)

                log = await self._ledger_repo.record(
                    TransactionLog(
                        from_account_id=actor.id,
                        from_username=actor.username,
                        from_role=actor_role,
                        to_account_id=target.id,
                        to_username=target.username,
                        to_role=target_role,
                        amount=amount,
                        type=direction,
                        created_at=self._clock.now(),
                    )
                )
                response = TransactionResponse.from_log(log)
            # --- END ATOMIC TRANSACTION ---

            logger.info(
                "transfer_completed",
                extra={"transaction_id": response.id, "target_id": target.id, "amount": amount, "type": direction},
            )
        return response

    # --- 2. MOTHER ADMIN BALANCE CREDIT ---

    async def credit(self, actor_id: int, amount: Decimal) -> AccountResponse:
        """Credits a Mother Admin's own balance. No other role may mint funds."""
        amount = validate_amount(amount)

        async with self._session.begin():
            actor = await self._account_repo.get_by_id(actor_id)
            if not actor:
                raise NotFoundError("Account not found.")
            if parse_role(actor.role) is not Role.MOTHER_ADMIN or actor.status != AccountStatus.ACTIVATED:
                raise PermissionDeniedError("Only an active Mother Admin can credit balance.")

            await self._account_repo.credit(actor.id, amount)
            await self._session.refresh(actor)
            response = AccountResponse.model_validate(actor)

        logger.info("balance_credited", extra={"account_id": actor_id, "amount": amount})
        return response

    # --- 3. HISTORY ---

    async def history(self, account_id: int | None = None, limit: int = 50) -> Sequence[TransactionResponse]:
        """Transfers newest first, optionally only those involving ``account_id``."""
        if limit < 1:
            raise ValidationError("Limit must be positive.")

        async with self._session.begin():
            if account_id is None:
                logs = await self._ledger_repo.list_recent(limit=limit)
            else:
                if not await self._account_repo.get_by_id(account_id):
                    raise NotFoundError("Account not found.")
                logs = await self._ledger_repo.list_for_account(account_id, limit=limit)
            return [TransactionResponse.from_log(log) for log in logs]

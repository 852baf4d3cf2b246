from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rolewallet.config import Settings
from rolewallet.core.clock import Clock, SystemClock
from rolewallet.core.roles import Role
from rolewallet.core.security.password import hash_password
from rolewallet.logging_config import get_logger
from rolewallet.repositories import AccountRepository

from .definitions import Account, AccountStatus

logger = get_logger("seed")

# --- SEEDING FUNCTIONS ---


async def initialize_mother_admin(session: AsyncSession, settings: Settings, clock: Clock) -> Account | None:
    """
    Creates the bootstrap Mother Admin from settings when no Mother Admin
    exists yet. Every other account is created through the services, so this
    is the only account that does not descend from an existing admin.
    """
    existing = (await session.scalars(select(Account).where(Account.role == Role.MOTHER_ADMIN).limit(1))).first()
    if existing:
        logger.info("seed_skipped", extra={"reason": "mother_admin_exists", "account_id": existing.id})
        return existing

    if not settings.mother_admin_email or not settings.mother_admin_password:
        logger.warning("seed_skipped", extra={"reason": "mother_admin_credentials_not_configured"})
        return None

    account = await AccountRepository(session).create(
        {
            "username": settings.mother_admin_username.strip(),
            "email": settings.mother_admin_email,
            "fullname": "Mother Admin",
            "password_hash": hash_password(settings.mother_admin_password, rounds=settings.bcrypt_rounds),
            "role": Role.MOTHER_ADMIN,
            "status": AccountStatus.ACTIVATED,
            "joined_at": clock.now(),
            "last_login": None,
            "created_by": None,
        }
    )
    logger.info("seed_created", extra={"account_id": account.id, "role": Role.MOTHER_ADMIN})
    return account


async def run_seeding(session_factory: async_sessionmaker[AsyncSession], settings: Settings, clock: Clock | None = None):
    """
    The main entry point to execute all seeding functions in one transaction.
    """
    clock = clock or SystemClock()
    async with session_factory() as session:
        try:
            async with session.begin():
                await initialize_mother_admin(session, settings, clock)
        except IntegrityError:
            logger.exception("seed_failed")
            raise

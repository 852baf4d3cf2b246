"""
Bootstraps a database: ``python -m rolewallet``.

Creates the schema and the initial Mother Admin described by the
``ROLEWALLET_*`` environment variables.
"""

import asyncio

from rolewallet.config import Settings
from rolewallet.db.engine import build_engine, build_session_factory, init_db
from rolewallet.logging_config import configure_logging
from rolewallet.models.seed import run_seeding


async def bootstrap(settings: Settings) -> None:
    engine = build_engine(settings)
    try:
        await init_db(engine)
        await run_seeding(build_session_factory(engine), settings)
    finally:
        await engine.dispose()


def main() -> None:
    settings = Settings.from_env()
    configure_logging(level=settings.log_level)
    asyncio.run(bootstrap(settings))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Standalone script to seed the global default categories for the Expense Share API
Usage: python seed_defaults.py

Safe to run repeatedly: categories that already exist are skipped.
"""

import asyncio
import logging
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from app.core.config import settings
from app.core.database import enable_sqlite_foreign_keys
from app.models import user  # noqa: F401  registers every table
from app.services.provisioning import seed_global_defaults

logging.basicConfig(level=logging.INFO)

async def seed_defaults():
    print("Seeding default categories...")

    # Create engine and session maker
    engine = create_async_engine(settings.DATABASE_URL)
    if settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)
    async_session_maker = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with async_session_maker() as session:
            added = await seed_global_defaults(session)
        if added:
            print(f"✅ Added {added} default categories")
        else:
            print("✅ Default categories already present, nothing to do")
    finally:
        await engine.dispose()

if __name__ == "__main__":
    asyncio.run(seed_defaults())

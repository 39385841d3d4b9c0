# scripts/check_db.py
import sys
from pathlib import Path
from sqlalchemy import text

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from herdbook.infrastructure.database import models  # noqa: F401  (registers tables on Base)
from herdbook.infrastructure.database.session import Base, engine


async def check_database():
    async with engine.begin() as conn:
        result = await conn.execute(text("SELECT 1"))
        print("DB Connected:", result.scalar())
        # Local development only; deployed schemas are managed outside this repo
        await conn.run_sync(Base.metadata.create_all)
        print("Tables:", ", ".join(sorted(Base.metadata.tables)))
    await engine.dispose()

asyncio.run(check_database())

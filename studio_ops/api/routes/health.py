from fastapi import APIRouter
from sqlalchemy import text

from studio_ops.infrastructure.db import database

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready():
    db_connected = False
    db_error = None
    if database.engine is not None:
        try:
            async with database.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            db_connected = True
        except Exception as exc:
            db_error = str(exc)

    return {
        "status": "ready" if db_connected else "not_ready",
        "db_connected": db_connected,
        "db_error": db_error,
    }

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import func, select, text

from alembic.config import Config
from alembic.script import ScriptDirectory
from db import SessionLocal, engine
from models import Question

router = APIRouter(prefix="/health", tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/db")
def health_db():
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
            questions = db.scalar(select(func.count()).select_from(Question))
        return {"ok": True, "questions": questions}
    except Exception:
        logger.exception("database health check failed")
        raise HTTPException(status_code=503, detail="db_unavailable")


def _alembic_heads() -> list[str]:
    cfg = Config("alembic.ini")
    script = ScriptDirectory.from_config(cfg)
    return list(script.get_heads())


@router.get("/migrations")
def health_migrations():
    heads: list[str] = []
    db_ver = None
    try:
        heads = _alembic_heads()
    except Exception:
        logger.warning("could not read alembic heads", exc_info=True)

    try:
        with engine.connect() as conn:
            try:
                db_ver = conn.execute(
                    text("SELECT version_num FROM alembic_version")
                ).scalar_one_or_none()
            except Exception:
                # schema created without alembic (tests, create_all)
                db_ver = None
    except Exception:
        logger.exception("database connection failed")
        return {
            "ok": False,
            "error": "db_connect_failed",
            "code_heads": heads,
            "db_version": db_ver,
        }

    synced = (db_ver in heads) if heads else False
    return {"ok": synced, "synced": synced, "db_version": db_ver, "code_heads": heads}

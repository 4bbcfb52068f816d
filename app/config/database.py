# app/config/database.py
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from .settings import settings

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, **overrides) -> Engine:
    """Crear el engine compartido por todo el proceso"""
    engine_kwargs = {
        "pool_pre_ping": True,
        "echo": settings.debug
    }

    if not database_url.startswith("sqlite"):
        engine_kwargs.update({
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_recycle": settings.db_pool_recycle,
        })

    engine_kwargs.update(overrides)
    return create_engine(database_url, **engine_kwargs)


# Engine creado una vez al iniciar el proceso; se libera en el shutdown de la app
engine = create_db_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Scope transaccional único: commit solo si todo el bloque termina bien,
    rollback ante cualquier excepción (que se re-lanza sin modificar).
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise

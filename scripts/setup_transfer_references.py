# scripts/setup_transfer_references.py
"""
Setup inicial de referencias para reportes de transferencia:
tablas, contadores por tipo y las tres configuraciones requeridas.

Uso:
    DATABASE_URL=postgresql://... \
    ENTITY_NAME="Schools Division Office" \
    FUND_CLUSTER_SEP="01" FUND_CLUSTER_PPE="02" \
    python -m scripts.setup_transfer_references
"""
import os
import logging

from app.config.database import SessionLocal, engine, transaction
from app.config.settings import settings
from app.modules.configuration import ConfigurationRepository
from app.modules.counters import CounterRepository
from app.shared.database.models import Base, TRANSFER_TYPES

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def setup_references() -> bool:
    """Idempotente: solo crea lo que falta y actualiza las configuraciones dadas"""
    logger.info("🔧 Configurando referencias de transferencias...")

    Base.metadata.create_all(bind=engine)
    logger.info("✅ Tablas verificadas")

    configs = {
        settings.entity_name_config: os.getenv("ENTITY_NAME"),
        settings.fund_cluster_sep_config: os.getenv("FUND_CLUSTER_SEP"),
        settings.fund_cluster_ppe_config: os.getenv("FUND_CLUSTER_PPE"),
    }

    db = SessionLocal()
    try:
        with transaction(db):
            counters = CounterRepository(db)
            for transfer_type in TRANSFER_TYPES:
                if counters.get_counter(transfer_type):
                    logger.info(f"📍 Contador existente: {transfer_type}")
                    continue
                counters.create_counter(transfer_type)
                logger.info(f"✅ Contador creado: {transfer_type}")

            configuration = ConfigurationRepository(db)
            for name, value in configs.items():
                if not value:
                    logger.warning(f"⚠️ Sin valor para '{name}', se omite")
                    continue
                configuration.upsert_config(name, value)
                logger.info(f"✅ Configuración '{name}' = {value}")

        logger.info("🎉 Setup completado exitosamente")
        return True

    except Exception as e:
        logger.error(f"❌ Error en setup: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(0 if setup_references() else 1)

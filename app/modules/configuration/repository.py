# app/modules/configuration/repository.py
from datetime import datetime
from typing import Optional
import logging

from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import BadRequestError
from app.shared.database.models import Configuration
from .schemas import TransferReportConfig

logger = logging.getLogger(__name__)


class ConfigurationRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_config_by_name(self, name: str) -> Optional[str]:
        config = self.db.query(Configuration).filter(
            and_(
                Configuration.name == name,
                Configuration.deleted_at.is_(None)
            )
        ).first()
        return config.value if config else None

    def upsert_config(self, name: str, value: str) -> Configuration:
        """Crear o actualizar una configuración (flush, sin commit)"""
        config = self.db.query(Configuration).filter(
            and_(
                Configuration.name == name,
                Configuration.deleted_at.is_(None)
            )
        ).first()

        if config:
            config.value = value
            config.updated_at = datetime.now()
        else:
            config = Configuration(name=name, value=value)
            self.db.add(config)

        self.db.flush()
        return config

    def get_transfer_report_config(self) -> TransferReportConfig:
        """Cargar y validar de una vez los tres valores requeridos"""
        entity_name = self.get_config_by_name(settings.entity_name_config)
        fund_cluster_sep = self.get_config_by_name(settings.fund_cluster_sep_config)
        fund_cluster_ppe = self.get_config_by_name(settings.fund_cluster_ppe_config)

        if not entity_name or not fund_cluster_sep or not fund_cluster_ppe:
            logger.error("❌ Configuración de reportes incompleta")
            raise BadRequestError("Required configuration not found.")

        return TransferReportConfig(
            entity_name=entity_name,
            fund_cluster_sep=fund_cluster_sep,
            fund_cluster_ppe=fund_cluster_ppe
        )

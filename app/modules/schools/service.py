# app/modules/schools/service.py
from typing import Any, Dict, Optional
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, NotFoundError
from .repository import SchoolsRepository

logger = logging.getLogger(__name__)


class SchoolsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = SchoolsRepository(db)

    async def find_or_create_school(
        self,
        school_id_or_name: str,
        division_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Resolver la escuela destino:
        - si el valor es un ID numérico, buscar por ID
        - si no, buscar por nombre exacto
        - si no existe, crearla ligada a la división (validando la división)
        """
        value = (school_id_or_name or "").strip()
        if not value:
            raise BadRequestError("School name is required.")

        school = None
        if value.isascii() and value.isdigit():
            school = self.repository.get_school_by_id(int(value))
        else:
            school = self.repository.get_school_by_name(value)

        if school:
            return {"id": school.id, "name": school.name, "division_id": school.division_id}

        if division_id is not None:
            division = self.repository.get_division_by_id(division_id)
            if not division:
                raise NotFoundError("School division not found.")

        school = self.repository.create_school(value, division_id)
        logger.info(f"🏫 Escuela creada: '{school.name}' (ID: {school.id})")

        return {"id": school.id, "name": school.name, "division_id": school.division_id}

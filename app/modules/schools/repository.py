# app/modules/schools/repository.py
from typing import Optional
from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.shared.database.models import School, SchoolDivision

class SchoolsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_division_by_id(self, division_id: int) -> Optional[SchoolDivision]:
        return self.db.query(SchoolDivision).filter(
            and_(
                SchoolDivision.id == division_id,
                SchoolDivision.deleted_at.is_(None)
            )
        ).first()

    def get_school_by_id(self, school_id: int) -> Optional[School]:
        return self.db.query(School).filter(
            and_(
                School.id == school_id,
                School.deleted_at.is_(None)
            )
        ).first()

    def get_school_by_name(self, name: str) -> Optional[School]:
        """Coincidencia exacta por nombre"""
        return self.db.query(School).filter(
            and_(
                School.name == name,
                School.deleted_at.is_(None)
            )
        ).order_by(School.id).first()

    def create_school(self, name: str, division_id: Optional[int]) -> School:
        """Crear escuela dentro de la transacción del llamador (flush, sin commit)"""
        school = School(name=name, division_id=division_id)
        self.db.add(school)
        self.db.flush()
        return school

# app/modules/counters/repository.py
from datetime import date
from typing import Optional
import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, NotFoundError
from app.shared.database.models import Counter

logger = logging.getLogger(__name__)


def format_transfer_no(count: int, today: Optional[date] = None) -> str:
    """YYYY-MM-DD-NN; el contador no se reinicia por día"""
    today = today or date.today()
    return f"{today.year}-{today.month:02d}-{today.day:02d}-{count:02d}"


class CounterRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_counter(self, counter_type: str) -> Counter:
        """Aprovisionar un contador nuevo en 0 (flush, sin commit)"""
        if self.get_counter(counter_type):
            logger.error(f"❌ Contador duplicado: {counter_type}")
            raise BadRequestError("Counter type already exists")

        counter = Counter(type=counter_type, value=0)
        self.db.add(counter)
        self.db.flush()
        return counter

    def get_counter(self, counter_type: str) -> Optional[Counter]:
        return self.db.query(Counter).filter(Counter.type == counter_type).first()

    def increment_counter_by_type(self, counter_type: str) -> int:
        """
        Incremento atómico en un solo UPDATE ... RETURNING.
        El valor solo queda consumido si la transacción del llamador hace commit.
        """
        stmt = (
            update(Counter)
            .where(Counter.type == counter_type)
            .values(value=Counter.value + 1)
            .returning(Counter.value)
            .execution_options(synchronize_session=False)
        )
        value = self.db.execute(stmt).scalar_one_or_none()

        if value is None:
            raise NotFoundError("Counter not found.")

        logger.info(f"🔢 Contador '{counter_type}' -> {value}")
        return value

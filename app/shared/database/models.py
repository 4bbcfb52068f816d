# app/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, DateTime, Text,
    Numeric, ForeignKey, UniqueConstraint, CheckConstraint,
    func
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# =====================================================
# CONSTANTES DE DOMINIO
# =====================================================

TRANSFER_TYPES = ("inventory-transfer-report", "property-transfer-report")

# Condiciones de una unidad de stock
GOOD_CONDITION = "good-condition"
REISSUED = "reissued"
ISSUED = "issued"
TRANSFERRED = "transferred"


# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=True, onupdate=func.current_timestamp())


# =====================================================
# REFERENCIAS: DIVISIONES, ESCUELAS, USUARIOS, CONFIGURACIÓN
# =====================================================

class SchoolDivision(Base, TimestampMixin):
    """División escolar (destino de transferencias)"""
    __tablename__ = "school_divisions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    deleted_at = Column(DateTime)

    schools = relationship("School", back_populates="division")


class School(Base, TimestampMixin):
    """Escuela perteneciente a una división"""
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    division_id = Column(Integer, ForeignKey("school_divisions.id"), index=True)
    deleted_at = Column(DateTime)

    division = relationship("SchoolDivision", back_populates="schools")


class User(Base, TimestampMixin):
    """Modelo de Usuario (solo lectura para este servicio)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True)
    title = Column(String(50), default="")
    first_name = Column(String(255), nullable=False)
    middle_name = Column(String(255), default="")
    last_name = Column(String(255), nullable=False)
    suffix = Column(String(50), default="")
    designation = Column(String(255), default="")
    type = Column(String(50), default="personnel")
    status = Column(String(20), default="active")
    deleted_at = Column(DateTime)

    @property
    def full_name(self):
        parts = [self.title, self.first_name, self.last_name, self.suffix]
        return " ".join(p for p in parts if p).strip()


class Configuration(Base, TimestampMixin):
    """Valores de configuración por nombre ("Entity Name", "Fund Cluster - SEP", ...)"""
    __tablename__ = "configurations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    value = Column(String(255), nullable=False, default="")
    deleted_at = Column(DateTime)


# =====================================================
# CONTADORES
# =====================================================

class Counter(Base):
    """Contador monotónico por tipo de transferencia"""
    __tablename__ = "counters"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(100), nullable=False, unique=True)
    value = Column(Integer, nullable=False, default=0)


# =====================================================
# ACTIVOS Y STOCK
# =====================================================

class Asset(Base, TimestampMixin):
    """Activo (SEP/PPE) con su balance agregado"""
    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_assets_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20))  # consumable, SEP, PPE
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    stock_number = Column(String(255), default="")
    unit_of_measurement = Column(String(50), default="")
    cost = Column(Numeric(12, 2), default=0)
    initial_qty = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    deleted_at = Column(DateTime)

    stocks = relationship("Stock", back_populates="asset")


class Stock(Base):
    """
    Unidad de stock rastreable. Las filas también forman el kardex del activo:
    cada emisión agrega una fila nueva con ins/outs/balance.
    """
    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False, index=True)
    asset_name = Column(String(255), default="")
    reference = Column(String(255), default="")
    serial_no = Column(String(255), default="")
    office_name = Column(String(255), default="")
    ins = Column(Integer, default=0)
    outs = Column(Integer, default=0)
    balance = Column(Integer, default=0)
    item_no = Column(String(50), default="")
    remarks = Column(Text, default="")
    initial_condition = Column(String(50), default="")
    condition = Column(String(50), nullable=False, default=GOOD_CONDITION)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    asset = relationship("Asset", back_populates="stocks")


# =====================================================
# TRANSFERENCIAS
# =====================================================

class Transfer(Base):
    """Reporte de transferencia (ITR / PTR)"""
    __tablename__ = "transfers"
    __table_args__ = (
        UniqueConstraint("type", "transfer_no", name="uq_transfers_type_transfer_no"),
    )

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(50), nullable=False, index=True)
    entity_name = Column(String(255), nullable=False)
    fund_cluster = Column(String(255), nullable=False)
    from_office = Column(String(255), nullable=False)
    to = Column(String(512), nullable=False)
    division_id = Column(Integer, ForeignKey("school_divisions.id"), nullable=False)
    school_id = Column(Integer, ForeignKey("schools.id"))
    transfer_no = Column(String(50), nullable=False)
    transfer_reason = Column(Text, default="")
    transfer_type = Column(String(100), default="")
    approved_by = Column(Integer, ForeignKey("users.id"))
    approved_at = Column(DateTime)
    issued_by = Column(Integer, ForeignKey("users.id"))
    received_by_name = Column(String(255), default="")
    received_by_designation = Column(String(255), default="")
    completed_at = Column(DateTime)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime)

    # Relationships
    item_stocks = relationship(
        "TransferItemStock",
        back_populates="transfer",
        order_by="TransferItemStock.position",
        cascade="all, delete-orphan"
    )
    approver = relationship("User", foreign_keys=[approved_by])
    issuer = relationship("User", foreign_keys=[issued_by])
    division = relationship("SchoolDivision")
    school = relationship("School")

    @property
    def stock_ids(self):
        return [item.stock_id for item in self.item_stocks]


class TransferItemStock(Base):
    """Referencia ordenada transferencia -> unidad de stock"""
    __tablename__ = "transfer_item_stocks"
    __table_args__ = (
        UniqueConstraint("transfer_id", "stock_id", name="uq_transfer_item_stock"),
    )

    id = Column(Integer, primary_key=True, index=True)
    transfer_id = Column(Integer, ForeignKey("transfers.id"), nullable=False, index=True)
    stock_id = Column(Integer, ForeignKey("stocks.id"), nullable=False)
    position = Column(Integer, nullable=False)

    transfer = relationship("Transfer", back_populates="item_stocks")
    stock = relationship("Stock")

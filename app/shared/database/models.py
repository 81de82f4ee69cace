from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base
from app.core.exceptions import BusinessRuleException
from app.shared.domain.discounts import (
    MAX_QUANTITY_MESSAGE, NO_DISCOUNT, calculate_discount, calculate_item_total,
    discount_percentage_for, is_within_maximum_quantity, to_money
)


def utcnow() -> datetime:
    """Fecha/hora actual en UTC sin tzinfo (formato guardado en BD)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convertir una fecha con zona horaria a UTC sin tzinfo; las naive se asumen UTC"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TimestampMixin:
    """Mixin para timestamps automáticos"""
    created_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime)

# ===== USUARIOS =====

class User(Base):
    """Modelo de Usuario - creador de ventas"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    sales = relationship("Sale", back_populates="created_by")

# ===== VENTAS =====

class Sale(Base, TimestampMixin):
    """Modelo de Venta con sus reglas de negocio"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    sale_number = Column(String(50), unique=True, nullable=False, index=True)
    sale_date = Column(DateTime, nullable=False, default=utcnow)
    customer = Column(String(100), nullable=False, index=True)
    branch = Column(String(100), nullable=False, index=True)
    total_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    is_cancelled = Column(Boolean, nullable=False, default=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    created_by = relationship("User", back_populates="sales")
    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id"
    )

    def touch(self):
        self.updated_at = utcnow()

    def calculate_total_amount(self) -> Decimal:
        """Total de la venta = suma de los totales de sus items"""
        self.total_amount = sum(
            (to_money(item.total_amount) for item in self.items),
            Decimal("0.00")
        )
        self.touch()
        return self.total_amount

    def find_item(self, item_id: int) -> Optional["SaleItem"]:
        return next((item for item in self.items if item.id == item_id), None)

    def add_item(self, product: str, quantity: int, unit_price) -> "SaleItem":
        """
        Agregar un item aplicando el descuento por cantidad.

        Lanza BusinessRuleException si la cantidad supera el máximo.
        """
        if not is_within_maximum_quantity(quantity):
            raise BusinessRuleException(MAX_QUANTITY_MESSAGE)

        item = SaleItem(
            product=product,
            quantity=quantity,
            unit_price=to_money(unit_price),
            discount=NO_DISCOUNT
        )
        item.apply_quantity_discount()

        self.items.append(item)
        self.calculate_total_amount()
        return item

    def update_item_quantity(self, item_id: int, quantity: int) -> bool:
        """Retorna False si el item no pertenece a la venta"""
        item = self.find_item(item_id)
        if item is None:
            return False

        if not is_within_maximum_quantity(quantity):
            raise BusinessRuleException(MAX_QUANTITY_MESSAGE)

        item.quantity = quantity
        item.apply_quantity_discount()
        self.calculate_total_amount()
        return True

    def remove_item(self, item_id: int) -> bool:
        """Retorna False si el item no pertenece a la venta"""
        item = self.find_item(item_id)
        if item is None:
            return False

        self.items.remove(item)
        self.calculate_total_amount()
        return True

    def reconcile_items(self, incoming: Iterable) -> None:
        """
        Sincronizar los items de la venta con una lista entrante.

        Cada entrada tiene `id` (opcional), `product`, `quantity` y
        `unit_price`. Las entradas cuyo id coincide con un item existente lo
        actualizan en sitio; las demás crean items nuevos. Los items
        existentes que no aparecen en la lista se eliminan.
        """
        incoming = list(incoming)

        # Validar todas las cantidades antes de modificar nada
        for entry in incoming:
            discount_percentage_for(entry.quantity)

        existing = {item.id: item for item in self.items if item.id is not None}
        retained = []

        for entry in incoming:
            item = existing.get(entry.id) if entry.id is not None else None
            if item is None:
                item = SaleItem(discount=NO_DISCOUNT)
                self.items.append(item)

            item.product = entry.product
            item.quantity = entry.quantity
            item.unit_price = to_money(entry.unit_price)
            item.apply_quantity_discount()
            retained.append(item)

        retained_ids = {id(item) for item in retained}
        for item in list(self.items):
            if id(item) not in retained_ids:
                self.items.remove(item)

        self.calculate_total_amount()

    def cancel(self):
        """Cancelación lógica: la venta nunca se elimina"""
        self.is_cancelled = True
        self.touch()


class SaleItem(Base):
    """Modelo de Item de Venta"""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    product = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0.00"))
    total_amount = Column(Numeric(14, 2), nullable=False)

    # Relationships
    sale = relationship("Sale", back_populates="items")

    def apply_quantity_discount(self) -> Decimal:
        """
        Recalcular porcentaje, descuento y total según la cantidad.

        Es idempotente: aplicarlo dos veces sobre el mismo item no cambia el
        resultado.
        """
        self.discount_percentage = discount_percentage_for(self.quantity)
        self.discount = calculate_discount(self.quantity, self.unit_price, self.discount_percentage)
        self.calculate_total_amount()
        return self.discount

    def calculate_total_amount(self) -> Decimal:
        self.total_amount = calculate_item_total(self.quantity, self.unit_price, self.discount or 0)
        return self.total_amount

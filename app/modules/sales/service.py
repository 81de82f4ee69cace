# app/modules/sales/service.py
import logging
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Optional
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleException
from app.shared.database.models import Sale, to_naive_utc
from .events import SaleCancelledEvent, SaleCreatedEvent, SaleModifiedEvent, publish_event
from .repository import SalesRepository
from .schemas import (
    SaleCreateRequest, SaleUpdateRequest, SaleItemRequest,
    SaleResponse, SaleListResponse, SaleCancelResponse
)
from .validators import validate_sale

logger = logging.getLogger(__name__)

class SalesService:
    """
    Servicio principal para las operaciones de ventas
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)

    # ==================== CREAR ====================

    async def create_sale(self, sale_data: SaleCreateRequest) -> SaleResponse:
        """
        Registrar venta con sus items aplicando descuentos por cantidad
        """
        if self.repository.get_sale_by_number(sale_data.sale_number):
            raise HTTPException(
                status_code=409,
                detail=f"Sale with number {sale_data.sale_number} already exists"
            )

        user = self.repository.get_user_by_id(sale_data.created_by_id)
        if not user:
            raise HTTPException(
                status_code=404,
                detail=f"User with ID {sale_data.created_by_id} not found"
            )

        with self._unit_of_work("creando venta"):
            sale = Sale(
                sale_number=sale_data.sale_number,
                sale_date=sale_data.sale_date,
                customer=sale_data.customer,
                branch=sale_data.branch,
                created_by_id=user.id,
                created_by=user
            )
            for item in sale_data.items:
                sale.add_item(item.product, item.quantity, item.unit_price)

            self._ensure_valid(sale)
            sale = self.repository.create_sale(sale)

        logger.info(f"Venta {sale.sale_number} creada con {len(sale.items)} items - total {sale.total_amount}")
        publish_event(SaleCreatedEvent(sale_id=sale.id))

        return self._to_response(sale)

    # ==================== CONSULTAS ====================

    async def get_sale(self, sale_id: int) -> SaleResponse:
        return self._to_response(self._get_sale_or_404(sale_id))

    async def get_sale_by_number(self, sale_number: str) -> SaleResponse:
        sale = self.repository.get_sale_by_number(sale_number)
        if not sale:
            raise HTTPException(status_code=404, detail=f"Sale with number {sale_number} not found")

        return self._to_response(sale)

    async def list_sales(
        self,
        customer: Optional[str] = None,
        branch: Optional[str] = None,
        created_by_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> SaleListResponse:
        """
        Listar ventas filtradas; el monto total excluye las canceladas
        """
        start_date = to_naive_utc(start_date)
        end_date = to_naive_utc(end_date)

        if start_date and end_date and start_date > end_date:
            raise HTTPException(status_code=400, detail="start_date no puede ser posterior a end_date")

        sales = self.repository.search_sales(
            customer=customer,
            branch=branch,
            created_by_id=created_by_id,
            start_date=start_date,
            end_date=end_date
        )

        return SaleListResponse(
            success=True,
            sales=[self._to_response(sale) for sale in sales],
            count=len(sales),
            total_amount=sum(
                (sale.total_amount for sale in sales if not sale.is_cancelled),
                Decimal("0.00")
            )
        )

    # ==================== ACTUALIZAR ====================

    async def update_sale(self, sale_id: int, sale_data: SaleUpdateRequest) -> SaleResponse:
        """
        Actualización completa: cabecera y sincronización de items.

        Los items con id conocido se actualizan, los demás se crean y los
        que no vienen en la lista se eliminan.
        """
        sale = self._get_active_sale(sale_id)

        if sale.sale_number != sale_data.sale_number:
            same_number = self.repository.get_sale_by_number(sale_data.sale_number)
            if same_number and same_number.id != sale.id:
                raise HTTPException(
                    status_code=409,
                    detail=f"Sale with number {sale_data.sale_number} already exists"
                )

        with self._unit_of_work(f"actualizando venta {sale_id}"):
            sale.sale_number = sale_data.sale_number
            sale.sale_date = sale_data.sale_date
            sale.customer = sale_data.customer
            sale.branch = sale_data.branch
            sale.reconcile_items(sale_data.items)

            self._ensure_valid(sale)
            sale = self.repository.save_sale(sale)

        logger.info(f"Venta {sale_id} actualizada - {len(sale.items)} items - total {sale.total_amount}")
        publish_event(SaleModifiedEvent(sale_id=sale.id))

        return self._to_response(sale)

    # ==================== ITEMS ====================

    async def add_item(self, sale_id: int, item_data: SaleItemRequest) -> SaleResponse:
        sale = self._get_active_sale(sale_id)

        with self._unit_of_work(f"agregando item a venta {sale_id}"):
            sale.add_item(item_data.product, item_data.quantity, item_data.unit_price)
            self._ensure_valid(sale)
            sale = self.repository.save_sale(sale)

        publish_event(SaleModifiedEvent(sale_id=sale.id))
        return self._to_response(sale)

    async def update_item_quantity(self, sale_id: int, item_id: int, quantity: int) -> SaleResponse:
        sale = self._get_active_sale(sale_id)

        with self._unit_of_work(f"actualizando item {item_id} de venta {sale_id}"):
            if not sale.update_item_quantity(item_id, quantity):
                raise HTTPException(status_code=404, detail=f"Item with ID {item_id} not found in sale {sale_id}")

            self._ensure_valid(sale)
            sale = self.repository.save_sale(sale)

        publish_event(SaleModifiedEvent(sale_id=sale.id))
        return self._to_response(sale)

    async def remove_item(self, sale_id: int, item_id: int) -> SaleResponse:
        sale = self._get_active_sale(sale_id)

        with self._unit_of_work(f"eliminando item {item_id} de venta {sale_id}"):
            if not sale.remove_item(item_id):
                raise HTTPException(status_code=404, detail=f"Item with ID {item_id} not found in sale {sale_id}")

            if not sale.items:
                raise BusinessRuleException("A sale must have at least one item.")

            self._ensure_valid(sale)
            sale = self.repository.save_sale(sale)

        publish_event(SaleModifiedEvent(sale_id=sale.id))
        return self._to_response(sale)

    # ==================== CANCELAR ====================

    async def cancel_sale(self, sale_id: int) -> SaleCancelResponse:
        """
        Cancelación lógica de la venta (nunca se elimina)
        """
        sale = self._get_sale_or_404(sale_id)
        if sale.is_cancelled:
            raise HTTPException(status_code=409, detail="Sale is already cancelled")

        with self._unit_of_work(f"cancelando venta {sale_id}"):
            sale = self.repository.cancel_sale(sale)

        logger.info(f"Venta {sale.sale_number} cancelada")
        publish_event(SaleCancelledEvent(sale_id=sale.id))

        return SaleCancelResponse(
            success=True,
            sale_id=sale.id,
            sale_number=sale.sale_number,
            is_cancelled=sale.is_cancelled,
            message="Venta cancelada exitosamente",
            cancelled_at=sale.updated_at
        )

    # ==================== UTILIDADES ====================

    def _get_sale_or_404(self, sale_id: int) -> Sale:
        sale = self.repository.get_sale_by_id(sale_id)
        if not sale:
            raise HTTPException(status_code=404, detail=f"Sale with ID {sale_id} not found")
        return sale

    def _get_active_sale(self, sale_id: int) -> Sale:
        sale = self._get_sale_or_404(sale_id)
        if sale.is_cancelled:
            raise HTTPException(status_code=409, detail="Cannot modify a cancelled sale")
        return sale

    def _ensure_valid(self, sale: Sale):
        errors = validate_sale(sale)
        if errors:
            raise HTTPException(
                status_code=400,
                detail={"message": "La venta no cumple las reglas de negocio", "errors": errors}
            )

    @contextmanager
    def _unit_of_work(self, operation: str):
        """
        Ejecutar una operación de escritura; cualquier error deshace la sesión
        """
        try:
            yield
        except BusinessRuleException as e:
            self.repository.rollback()
            logger.warning(f"Regla de negocio violada {operation}: {e.message}")
            raise HTTPException(status_code=400, detail=e.message)
        except HTTPException:
            self.repository.rollback()
            raise
        except IntegrityError as e:
            self.repository.rollback()
            logger.warning(f"Conflicto de integridad {operation}: {e.orig}")
            raise HTTPException(status_code=409, detail="Sale number already exists")
        except SQLAlchemyError as e:
            self.repository.rollback()
            logger.exception(f"Error de base de datos {operation}")
            raise HTTPException(status_code=500, detail=f"Error {operation}: {str(e)}")

    def _to_response(self, sale: Sale) -> SaleResponse:
        return SaleResponse.model_validate(sale)

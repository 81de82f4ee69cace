# app/modules/sales/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from app.config.database import get_db
from .service import SalesService
from .schemas import (
    SaleCreateRequest, SaleUpdateRequest, SaleItemRequest, SaleItemQuantityRequest,
    SaleResponse, SaleListResponse, SaleCancelResponse
)

router = APIRouter(prefix="/sales", tags=["Sales"])

# ==================== REGISTRO DE VENTAS ====================

@router.post("/", response_model=SaleResponse, status_code=201)
async def create_sale(
    sale_data: SaleCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar venta con sus items

    Reglas de descuento por cantidad de items idénticos:
    - 4 a 9 unidades: 10%
    - 10 a 20 unidades: 20%
    - Menos de 4: sin descuento
    - Más de 20: rechazado
    """
    service = SalesService(db)

    return await service.create_sale(sale_data)

# ==================== CONSULTAS ====================

@router.get("/", response_model=SaleListResponse)
async def list_sales(
    customer: Optional[str] = None,
    branch: Optional[str] = None,
    created_by_id: Optional[int] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db)
):
    """
    Listar ventas filtrando por cliente, sucursal, creador o rango de fechas
    """
    service = SalesService(db)

    return await service.list_sales(
        customer=customer,
        branch=branch,
        created_by_id=created_by_id,
        start_date=start_date,
        end_date=end_date
    )

@router.get("/health")
async def sales_module_health():
    """
    Verificar estado del módulo de ventas
    """
    return {
        "module": "sales",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Registro de ventas",
            "Descuentos por cantidad",
            "Actualización con sincronización de items",
            "Cancelación lógica"
        ]
    }

@router.get("/number/{sale_number}", response_model=SaleResponse)
async def get_sale_by_number(
    sale_number: str,
    db: Session = Depends(get_db)
):
    service = SalesService(db)

    return await service.get_sale_by_number(sale_number)

@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: int,
    db: Session = Depends(get_db)
):
    service = SalesService(db)

    return await service.get_sale(sale_id)

# ==================== ACTUALIZACIÓN ====================

@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    sale_id: int,
    sale_data: SaleUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Actualizar venta completa

    Items con `id` existente se actualizan, items sin `id` se agregan y los
    items que no se envían se eliminan.
    """
    service = SalesService(db)

    return await service.update_sale(sale_id, sale_data)

@router.post("/{sale_id}/items", response_model=SaleResponse, status_code=201)
async def add_sale_item(
    sale_id: int,
    item_data: SaleItemRequest,
    db: Session = Depends(get_db)
):
    service = SalesService(db)

    return await service.add_item(sale_id, item_data)

@router.patch("/{sale_id}/items/{item_id}", response_model=SaleResponse)
async def update_sale_item_quantity(
    sale_id: int,
    item_id: int,
    quantity_data: SaleItemQuantityRequest,
    db: Session = Depends(get_db)
):
    """
    Cambiar la cantidad de un item; el descuento se recalcula
    """
    service = SalesService(db)

    return await service.update_item_quantity(sale_id, item_id, quantity_data.quantity)

@router.delete("/{sale_id}/items/{item_id}", response_model=SaleResponse)
async def remove_sale_item(
    sale_id: int,
    item_id: int,
    db: Session = Depends(get_db)
):
    service = SalesService(db)

    return await service.remove_item(sale_id, item_id)

# ==================== CANCELACIÓN ====================

@router.post("/{sale_id}/cancel", response_model=SaleCancelResponse)
async def cancel_sale(
    sale_id: int,
    db: Session = Depends(get_db)
):
    """
    Cancelar venta (cancelación lógica, la venta no se elimina)
    """
    service = SalesService(db)

    return await service.cancel_sale(sale_id)

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.shared.database.models import to_naive_utc, utcnow
from app.shared.domain.discounts import MAX_QUANTITY, MIN_QUANTITY

# ==================== CLASE BASE PARA RESPUESTAS (Pydantic v2) ====================

class SalesBaseModel(BaseModel):
    """
    Clase base para todos los esquemas de respuesta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class SaleItemRequest(BaseModel):
    product: str = Field(..., min_length=1, max_length=100, description="Nombre del producto")
    quantity: int = Field(..., ge=MIN_QUANTITY, le=MAX_QUANTITY, description="Cantidad (máximo 20 idénticos)")
    unit_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Precio unitario")

    @field_validator('product')
    @classmethod
    def validate_product(cls, v: str):
        return CommonValidators.validate_non_empty_string(v)

class SaleHeaderRequest(BaseModel):
    sale_number: str = Field(..., min_length=1, max_length=50, description="Número único de la venta")
    sale_date: datetime = Field(..., description="Fecha de la venta (no puede ser futura)")
    customer: str = Field(..., min_length=1, max_length=100, description="Cliente")
    branch: str = Field(..., min_length=1, max_length=100, description="Sucursal")

    @field_validator('sale_number', 'customer', 'branch')
    @classmethod
    def validate_text(cls, v: str):
        return CommonValidators.validate_non_empty_string(v)

    @field_validator('sale_date')
    @classmethod
    def validate_sale_date(cls, v: datetime):
        return CommonValidators.validate_past_date(v)

class SaleCreateRequest(SaleHeaderRequest):
    created_by_id: int = Field(..., gt=0, description="Usuario que registra la venta")
    items: List[SaleItemRequest] = Field(..., min_length=1, description="Items de la venta")

class SaleItemUpdateRequest(SaleItemRequest):
    id: Optional[int] = Field(None, description="ID del item existente; vacío para un item nuevo")

class SaleUpdateRequest(SaleHeaderRequest):
    items: List[SaleItemUpdateRequest] = Field(..., min_length=1, description="Items de la venta")

    @field_validator('items')
    @classmethod
    def validate_unique_item_ids(cls, v: List[SaleItemUpdateRequest]):
        ids = [item.id for item in v if item.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError('Un mismo item no puede aparecer dos veces')
        return v

class SaleItemQuantityRequest(BaseModel):
    quantity: int = Field(..., ge=MIN_QUANTITY, le=MAX_QUANTITY, description="Nueva cantidad")

# ==================== RESPONSE SCHEMAS ====================

class SaleItemResponse(SalesBaseModel):
    id: int
    product: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    discount_percentage: Decimal
    total_amount: Decimal

class CreatedByResponse(SalesBaseModel):
    id: int
    username: str

class SaleResponse(SalesBaseModel):
    id: int
    sale_number: str
    sale_date: datetime
    customer: str
    branch: str
    total_amount: Decimal
    is_cancelled: bool
    created_at: datetime
    updated_at: Optional[datetime]

    # Relacionados
    created_by: CreatedByResponse
    items: List[SaleItemResponse]

class SaleListResponse(SalesBaseModel):
    success: bool
    sales: List[SaleResponse]
    count: int
    total_amount: Decimal

class SaleCancelResponse(SalesBaseModel):
    success: bool
    sale_id: int
    sale_number: str
    is_cancelled: bool
    message: str
    cancelled_at: datetime

# ==================== VALIDADORES COMUNES ====================

class CommonValidators:
    @staticmethod
    def validate_non_empty_string(v):
        if not v or not v.strip():
            raise ValueError('Este campo no puede estar vacío')
        return v.strip()

    @staticmethod
    def validate_past_date(v: datetime):
        # Se guarda siempre como UTC sin tzinfo
        v = to_naive_utc(v)
        if v > utcnow():
            raise ValueError('Sale date cannot be in the future.')
        return v

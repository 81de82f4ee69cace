# app/modules/sales/__init__.py
"""
Módulo de Ventas

- Registro de ventas con items
- Descuentos por cantidad (10% desde 4 unidades, 20% de 10 a 20)
- Consulta por ID, número o filtros
- Actualización completa con sincronización de items
- Alta, cambio de cantidad y baja de items individuales
- Cancelación lógica

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de aplicación
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
- validators.py: Invariantes de venta e items
- events.py: Eventos de dominio (solo log)
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]

# app/modules/sales/events.py
"""
Eventos de dominio de ventas.

Solo se registran en el log; no hay suscriptores externos.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Type

from app.shared.database.models import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleEvent:
    sale_id: int
    occurred_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class SaleCreatedEvent(SaleEvent):
    pass


@dataclass(frozen=True)
class SaleModifiedEvent(SaleEvent):
    pass


@dataclass(frozen=True)
class SaleCancelledEvent(SaleEvent):
    pass


EventHandler = Callable[[SaleEvent], None]

_handlers: Dict[Type[SaleEvent], List[EventHandler]] = {}


def subscribe(event_type: Type[SaleEvent], handler: EventHandler):
    _handlers.setdefault(event_type, []).append(handler)


def unsubscribe(event_type: Type[SaleEvent], handler: EventHandler):
    if handler in _handlers.get(event_type, []):
        _handlers[event_type].remove(handler)


def publish_event(event: SaleEvent):
    """Despachar el evento a los handlers registrados para su tipo"""
    for handler in _handlers.get(type(event), []):
        try:
            handler(event)
        except Exception:
            # Un handler fallido no debe deshacer una venta ya guardada
            logger.exception(f"Error en handler de {type(event).__name__} para venta {event.sale_id}")


# ==================== HANDLERS POR DEFECTO ====================

def log_sale_created(event: SaleCreatedEvent):
    logger.info(f"Sale with ID {event.sale_id} has been created.")


def log_sale_modified(event: SaleModifiedEvent):
    logger.info(f"Sale with ID {event.sale_id} has been modified.")


def log_sale_cancelled(event: SaleCancelledEvent):
    logger.info(f"Sale with ID {event.sale_id} has been cancelled.")


subscribe(SaleCreatedEvent, log_sale_created)
subscribe(SaleModifiedEvent, log_sale_modified)
subscribe(SaleCancelledEvent, log_sale_cancelled)

# app/modules/sales/repository.py
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload, joinedload
from sqlalchemy import desc

from app.shared.database.models import Sale, User

class SalesRepository:
    """
    Repositorio para todas las operaciones de datos relacionadas con ventas
    """

    def __init__(self, db: Session):
        self.db = db

    def _sales_query(self):
        return self.db.query(Sale).options(
            selectinload(Sale.items),
            joinedload(Sale.created_by)
        )

    # ==================== VENTAS ====================

    def create_sale(self, sale: Sale) -> Sale:
        """
        Guardar una venta nueva con sus items
        """
        self.db.add(sale)
        self.db.commit()
        self.db.refresh(sale)

        return sale

    def save_sale(self, sale: Sale) -> Sale:
        """
        Persistir cambios de una venta existente (incluye altas y bajas de items)
        """
        self.db.commit()
        self.db.refresh(sale)

        return sale

    def cancel_sale(self, sale: Sale) -> Sale:
        """
        Marcar venta como cancelada
        """
        sale.cancel()
        return self.save_sale(sale)

    def get_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        """
        Obtener venta por ID
        """
        return self._sales_query().filter(Sale.id == sale_id).first()

    def get_sale_by_number(self, sale_number: str) -> Optional[Sale]:
        """
        Obtener venta por número
        """
        return self._sales_query().filter(Sale.sale_number == sale_number).first()

    def search_sales(
        self,
        customer: Optional[str] = None,
        branch: Optional[str] = None,
        created_by_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> List[Sale]:
        """
        Buscar ventas por cliente, sucursal, creador y rango de fechas
        """
        filters = []
        if customer:
            filters.append(Sale.customer == customer)
        if branch:
            filters.append(Sale.branch == branch)
        if created_by_id is not None:
            filters.append(Sale.created_by_id == created_by_id)
        if start_date is not None:
            filters.append(Sale.sale_date >= start_date)
        if end_date is not None:
            filters.append(Sale.sale_date <= end_date)

        return self._sales_query().filter(*filters).order_by(desc(Sale.sale_date)).all()

    def rollback(self):
        self.db.rollback()

    # ==================== UTILIDADES ====================

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """
        Obtener usuario por ID
        """
        return self.db.query(User).filter(User.id == user_id).first()

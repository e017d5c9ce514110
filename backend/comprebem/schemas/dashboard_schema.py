# backend/comprebem/schemas/dashboard_schema.py
"""
Esquemas Pydantic para el resumen del dashboard.
"""

from datetime import date
from decimal import Decimal
from typing import List
from pydantic import BaseModel, Field


class RecentOrder(BaseModel):
    """Pedido reciente tal como se muestra en el dashboard."""
    id: int
    created_at: date
    total_amount: Decimal
    client_name: str


class DashboardResponse(BaseModel):
    total_products: int
    total_clients: int
    total_orders: int
    total_revenue: Decimal
    month_over_month_growth: str = Field(..., description="Porcentaje con dos decimales o 'new'")
    top_product: str
    recent_orders: List[RecentOrder] = []

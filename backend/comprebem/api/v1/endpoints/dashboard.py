# backend/comprebem/api/v1/endpoints/dashboard.py
"""
Endpoint del dashboard: indicadores agregados de la consola.
"""

from datetime import date
import logging

from fastapi import APIRouter, Depends

from comprebem.api import deps
from comprebem.core.config import settings
from comprebem.schemas.dashboard_schema import DashboardResponse, RecentOrder
from comprebem.services import metrics
from comprebem.services.filter_service import client_label
from comprebem.services.repository import EntityRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=DashboardResponse)
async def read_dashboard(
    repository: EntityRepository = Depends(deps.get_repository),
) -> DashboardResponse:
    """
    Calcula los indicadores del dashboard a partir de las colecciones
    completas: totales, crecimiento mes a mes, producto más vendido y los
    pedidos más recientes.
    """
    products_count = await repository.count_products()
    clients_count = await repository.count_clients()
    orders = await repository.list_orders()
    line_items = await repository.list_line_items()
    products = await repository.list_products(active=None)

    summary = metrics.dashboard_summary(
        products_count=products_count,
        clients_count=clients_count,
        orders=orders,
        line_items=line_items,
        products=products,
        today=date.today(),
        recent_limit=settings.RECENT_ORDERS_LIMIT,
    )
    summary["recent_orders"] = [
        RecentOrder(
            id=order.id,
            created_at=order.created_at,
            total_amount=order.total_amount,
            client_name=client_label(order),
        )
        for order in summary["recent_orders"]
    ]
    logger.debug(f"📊 DASHBOARD: {summary['total_orders']} pedidos, top '{summary['top_product']}'")
    return DashboardResponse(**summary)

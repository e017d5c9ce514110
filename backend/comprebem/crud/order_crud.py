# backend/comprebem/crud/order_crud.py
"""
Operaciones CRUD para los modelos Order y OrderItem.

Las lecturas precargan cliente, líneas y producto de cada línea para poder
serializar el pedido sin consultas perezosas (no permitidas en asyncio).
Las escrituras solo hacen flush: el commit (o el rollback) lo decide
EntityRepository según el modo de escritura de pedidos.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from comprebem.crud.query_utils import order_by_clause
from comprebem.db.models.order_model import Order, OrderItem, ORDER_STATUS_PENDING

SORTABLE_FIELDS = {
    "id": Order.id,
    "client_id": Order.client_id,
    "created_at": Order.created_at,
    "total_amount": Order.total_amount,
}


def _order_query():
    # populate_existing refresca pedidos ya cargados en la sesión, p. ej.
    # después de sustituir sus líneas con un DELETE masivo.
    return (
        select(Order)
        .options(
            selectinload(Order.client),
            selectinload(Order.items).selectinload(OrderItem.product),
        )
        .execution_options(populate_existing=True)
    )


# ========================================
# LECTURA
# ========================================

async def get_orders(
    db: AsyncSession,
    sort_by: str = "created_at",
    descending: bool = True,
) -> List[Order]:
    query = _order_query().order_by(order_by_clause(SORTABLE_FIELDS, sort_by, descending), Order.id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_orders_by_ids(db: AsyncSession, ids: Sequence[int]) -> List[Order]:
    if not ids:
        return []
    result = await db.execute(_order_query().filter(Order.id.in_(list(ids))).order_by(Order.id))
    return list(result.scalars().all())


async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    result = await db.execute(_order_query().filter(Order.id == order_id))
    return result.scalars().first()


async def get_line_items(db: AsyncSession) -> List[OrderItem]:
    """Todas las líneas de todos los pedidos, en orden de inserción."""
    result = await db.execute(select(OrderItem).order_by(OrderItem.id))
    return list(result.scalars().all())


# ========================================
# ESCRITURA
# ========================================

async def create_order(
    db: AsyncSession,
    client_id: int,
    created_at: date,
    total_amount: Decimal,
    status: str = ORDER_STATUS_PENDING,
) -> Order:
    """Inserta la fila del pedido y hace flush para obtener su id."""
    db_order = Order(
        client_id=client_id,
        created_at=created_at,
        total_amount=total_amount,
        status=status,
    )
    db.add(db_order)
    await db.flush()
    return db_order


async def update_order(db: AsyncSession, order_id: int, patch: Dict[str, Any]) -> Optional[Order]:
    result = await db.execute(select(Order).filter(Order.id == order_id))
    db_order = result.scalars().first()
    if db_order is None:
        return None
    for field, value in patch.items():
        setattr(db_order, field, value)
    await db.flush()
    return db_order


async def insert_line_items(db: AsyncSession, order_id: int, items: Iterable[Any]) -> List[OrderItem]:
    """
    Inserta las líneas de un pedido. Cada elemento aporta `product_id`,
    `quantity` y `unit_price_at_order_time`; el precio se guarda tal cual,
    sin volver a leer el precio actual del producto.
    """
    db_items = [
        OrderItem(
            order_id=order_id,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price_at_order_time=item.unit_price_at_order_time,
        )
        for item in items
    ]
    db.add_all(db_items)
    await db.flush()
    return db_items


async def delete_line_items(db: AsyncSession, order_id: int) -> int:
    """Elimina todas las líneas de un pedido. Devuelve cuántas se borraron."""
    result = await db.execute(
        delete(OrderItem)
        .where(OrderItem.order_id == order_id)
    )
    return result.rowcount


async def delete_order(db: AsyncSession, order_id: int) -> int:
    """Elimina la fila del pedido (las líneas deben borrarse antes)."""
    result = await db.execute(
        delete(Order)
        .where(Order.id == order_id)
    )
    return result.rowcount

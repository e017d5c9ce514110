# backend/comprebem/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product.

Mismo ciclo de vida que los clientes: borrado lógico con `active=False`.
Los productos desactivados desaparecen del catálogo y del selector de
pedidos, pero siguen resolviéndose por id para las líneas históricas.

Ninguna función hace commit; lo gestiona la capa superior (EntityRepository).
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from comprebem.crud.query_utils import order_by_clause
from comprebem.db.models.product_model import Product

import logging

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id": Product.id,
    "name": Product.name,
    "unit_price": Product.unit_price,
    "stock_quantity": Product.stock_quantity,
    "expiration_date": Product.expiration_date,
}

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_products(
    db: AsyncSession,
    active: Optional[bool] = True,
    sort_by: str = "name",
    descending: bool = False,
) -> List[Product]:
    """Lista productos filtrando por `active` (None = todos) y ordenados por un campo permitido."""
    query = select(Product)
    if active is not None:
        query = query.filter(Product.active == active)
    query = query.order_by(order_by_clause(SORTABLE_FIELDS, sort_by, descending), Product.id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_products_by_ids(db: AsyncSession, ids: Sequence[int]) -> List[Product]:
    """Obtiene productos por id, activos o no."""
    if not ids:
        return []
    result = await db.execute(select(Product).filter(Product.id.in_(list(ids))).order_by(Product.id))
    return list(result.scalars().all())


async def get_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    result = await db.execute(select(Product).filter(Product.id == product_id))
    return result.scalars().first()


async def count_products(db: AsyncSession) -> int:
    """Número total de productos registrados, incluidos los desactivados."""
    return await db.scalar(select(func.count(Product.id))) or 0

# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE)
# ========================================

async def create_product(db: AsyncSession, data: Dict[str, Any]) -> Product:
    db_product = Product(**data, active=True)
    db.add(db_product)
    await db.flush()
    logger.info(f"Producto '{db_product.name}' creado con id {db_product.id}")
    return db_product


async def update_product(db: AsyncSession, product_id: int, patch: Dict[str, Any]) -> Optional[Product]:
    """
    Aplica un parche parcial. Cambiar `unit_price` no toca las líneas de
    pedidos ya guardados: cada línea conserva su propio precio.
    """
    db_product = await get_product(db, product_id)
    if db_product is None:
        return None
    for field, value in patch.items():
        setattr(db_product, field, value)
    await db.flush()
    return db_product

# backend/comprebem/crud/client_crud.py
"""
Este archivo contiene las operaciones CRUD para el modelo Client.

Los clientes nunca se eliminan físicamente: el borrado pone `active=False`.
Los listados filtran por `active`, pero la búsqueda por ids no, para que los
pedidos históricos puedan seguir mostrando a sus clientes.

Ninguna función hace commit; lo gestiona la capa superior (EntityRepository).
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from comprebem.crud.query_utils import order_by_clause
from comprebem.db.models.client_model import Client

SORTABLE_FIELDS = {
    "id": Client.id,
    "name": Client.name,
    "tax_id": Client.tax_id,
    "email": Client.email,
    "phone": Client.phone,
}


async def get_clients(
    db: AsyncSession,
    active: Optional[bool] = True,
    sort_by: str = "name",
    descending: bool = False,
) -> List[Client]:
    """Lista clientes filtrando por `active` (None = todos) y ordenados por un campo permitido."""
    query = select(Client)
    if active is not None:
        query = query.filter(Client.active == active)
    query = query.order_by(order_by_clause(SORTABLE_FIELDS, sort_by, descending), Client.id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_clients_by_ids(db: AsyncSession, ids: Sequence[int]) -> List[Client]:
    """Obtiene clientes por id, activos o no."""
    if not ids:
        return []
    result = await db.execute(select(Client).filter(Client.id.in_(list(ids))).order_by(Client.id))
    return list(result.scalars().all())


async def get_client(db: AsyncSession, client_id: int) -> Optional[Client]:
    result = await db.execute(select(Client).filter(Client.id == client_id))
    return result.scalars().first()


async def count_clients(db: AsyncSession) -> int:
    """Número total de clientes registrados, incluidos los desactivados."""
    return await db.scalar(select(func.count(Client.id))) or 0


async def create_client(db: AsyncSession, data: Dict[str, Any]) -> Client:
    db_client = Client(**data, active=True)
    db.add(db_client)
    await db.flush()
    return db_client


async def update_client(db: AsyncSession, client_id: int, patch: Dict[str, Any]) -> Optional[Client]:
    """Aplica un parche parcial. Devuelve None si el cliente no existe."""
    db_client = await get_client(db, client_id)
    if db_client is None:
        return None
    for field, value in patch.items():
        setattr(db_client, field, value)
    await db.flush()
    return db_client

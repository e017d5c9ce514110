# backend/comprebem/services/repository.py

"""
Fachada de acceso a datos para clientes, productos y pedidos.

EntityRepository agrupa las operaciones CRUD de las tres entidades sobre una
única sesión asíncrona y añade dos responsabilidades que los módulos CRUD no
tienen:

- Control de transacciones: cada operación simple confirma al terminar; las
  escrituras de pedidos de varios pasos se agrupan con `order_write()`.
- Traducción de errores: cualquier SQLAlchemyError se relanza como
  RepositoryError con el nombre de la operación y el mensaje original.

No contiene lógica de negocio: el total de un pedido y el precio de cada
línea llegan ya calculados desde el servicio de composición.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from comprebem.core.exceptions import NotFoundError, PartialWriteError, RepositoryError
from comprebem.crud import client_crud, order_crud, product_crud
from comprebem.db.models.client_model import Client
from comprebem.db.models.order_model import Order, OrderItem
from comprebem.db.models.product_model import Product

logger = logging.getLogger(__name__)


class EntityRepository:
    """
    Acceso tipado a las colecciones de la consola.

    Con `atomic_order_writes=True` (por defecto) los pasos de una escritura
    de pedido comparten una transacción: o se confirman todos o ninguno.
    Con False cada paso se confirma al terminar, uno tras otro;
    si un paso falla después de otro ya confirmado se lanza PartialWriteError.
    """

    def __init__(self, db: AsyncSession, atomic_order_writes: bool = True):
        self.db = db
        self.atomic_order_writes = atomic_order_writes
        self._write_steps: Optional[List[str]] = None

    # ========================================
    # GESTIÓN DE TRANSACCIONES Y ERRORES
    # ========================================

    async def _commit(self, operation: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"❌ ERROR: Fallo al confirmar '{operation}': {e}")
            raise RepositoryError(operation, str(e)) from e

    async def _run(self, operation: str, coro, commit: bool = False):
        """Ejecuta una operación CRUD traduciendo los errores de SQLAlchemy."""
        try:
            result = await coro
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"❌ ERROR: Fallo en '{operation}': {e}")
            raise RepositoryError(operation, str(e)) from e
        if commit:
            await self._commit(operation)
        return result

    async def _step(self, name: str, coro):
        """
        Ejecuta un paso de una escritura de pedido. Fuera de `order_write()`
        el paso se confirma por sí solo.
        """
        if self._write_steps is None:
            return await self._run(name, coro, commit=True)

        result = await coro
        if not self.atomic_order_writes:
            await self.db.commit()
        self._write_steps.append(name)
        return result

    @asynccontextmanager
    async def order_write(self, operation: str) -> AsyncIterator[None]:
        """
        Agrupa los pasos de una escritura de pedido (insertar/actualizar el
        pedido, borrar e insertar líneas). Los pasos se ejecutan en el orden
        en que se llaman, nunca en paralelo.
        """
        self._write_steps = []
        try:
            yield
            if self.atomic_order_writes:
                await self.db.commit()
            logger.info(f"✅ PEDIDO: '{operation}' confirmado ({', '.join(self._write_steps)})")
        except SQLAlchemyError as e:
            await self.db.rollback()
            completed = list(self._write_steps)
            if not self.atomic_order_writes and completed:
                logger.error(f"❌ ERROR: '{operation}' incompleto, pasos ya confirmados: {completed}")
                raise PartialWriteError(operation, completed, str(e)) from e
            logger.error(f"❌ ERROR: '{operation}' revertido: {e}")
            raise RepositoryError(operation, str(e)) from e
        except Exception:
            await self.db.rollback()
            raise
        finally:
            self._write_steps = None

    # ========================================
    # CLIENTES
    # ========================================

    async def list_clients(self, active: Optional[bool] = True, sort_by: str = "name", descending: bool = False) -> List[Client]:
        return await self._run("listar clientes", client_crud.get_clients(self.db, active, sort_by, descending))

    async def get_clients_by_ids(self, ids: Sequence[int]) -> List[Client]:
        return await self._run("cargar clientes", client_crud.get_clients_by_ids(self.db, ids))

    async def get_client(self, client_id: int) -> Client:
        client = await self._run("cargar cliente", client_crud.get_client(self.db, client_id))
        if client is None:
            raise NotFoundError("Cliente", client_id)
        return client

    async def count_clients(self) -> int:
        return await self._run("contar clientes", client_crud.count_clients(self.db))

    async def insert_client(self, data: Dict[str, Any]) -> Client:
        return await self._run("añadir cliente", client_crud.create_client(self.db, data), commit=True)

    async def update_client(self, client_id: int, patch: Dict[str, Any]) -> Client:
        client = await self._run("actualizar cliente", client_crud.update_client(self.db, client_id, patch), commit=True)
        if client is None:
            raise NotFoundError("Cliente", client_id)
        return client

    async def soft_delete_client(self, client_id: int) -> Client:
        client = await self._run("desactivar cliente", client_crud.update_client(self.db, client_id, {"active": False}), commit=True)
        if client is None:
            raise NotFoundError("Cliente", client_id)
        return client

    # ========================================
    # PRODUCTOS
    # ========================================

    async def list_products(self, active: Optional[bool] = True, sort_by: str = "name", descending: bool = False) -> List[Product]:
        return await self._run("listar productos", product_crud.get_products(self.db, active, sort_by, descending))

    async def get_products_by_ids(self, ids: Sequence[int]) -> List[Product]:
        return await self._run("cargar productos", product_crud.get_products_by_ids(self.db, ids))

    async def get_product(self, product_id: int) -> Product:
        product = await self._run("cargar producto", product_crud.get_product(self.db, product_id))
        if product is None:
            raise NotFoundError("Producto", product_id)
        return product

    async def count_products(self) -> int:
        return await self._run("contar productos", product_crud.count_products(self.db))

    async def insert_product(self, data: Dict[str, Any]) -> Product:
        return await self._run("añadir producto", product_crud.create_product(self.db, data), commit=True)

    async def update_product(self, product_id: int, patch: Dict[str, Any]) -> Product:
        product = await self._run("actualizar producto", product_crud.update_product(self.db, product_id, patch), commit=True)
        if product is None:
            raise NotFoundError("Producto", product_id)
        return product

    async def soft_delete_product(self, product_id: int) -> Product:
        product = await self._run("desactivar producto", product_crud.update_product(self.db, product_id, {"active": False}), commit=True)
        if product is None:
            raise NotFoundError("Producto", product_id)
        return product

    # ========================================
    # PEDIDOS
    # ========================================

    async def list_orders(self, sort_by: str = "created_at", descending: bool = True) -> List[Order]:
        return await self._run("listar pedidos", order_crud.get_orders(self.db, sort_by, descending))

    async def get_orders_by_ids(self, ids: Sequence[int]) -> List[Order]:
        return await self._run("cargar pedidos", order_crud.get_orders_by_ids(self.db, ids))

    async def get_order(self, order_id: int) -> Order:
        order = await self._run("cargar pedido", order_crud.get_order(self.db, order_id))
        if order is None:
            raise NotFoundError("Pedido", order_id)
        return order

    async def list_line_items(self) -> List[OrderItem]:
        return await self._run("listar líneas de pedido", order_crud.get_line_items(self.db))

    async def insert_order(self, client_id: int, created_at: date, total_amount: Decimal) -> Order:
        return await self._step(
            "insertar pedido",
            order_crud.create_order(self.db, client_id=client_id, created_at=created_at, total_amount=total_amount),
        )

    async def update_order(self, order_id: int, patch: Dict[str, Any]) -> Order:
        order = await self._step("actualizar pedido", order_crud.update_order(self.db, order_id, patch))
        if order is None:
            raise NotFoundError("Pedido", order_id)
        return order

    async def insert_line_items(self, order_id: int, items: Iterable[Any]) -> List[OrderItem]:
        return await self._step("insertar líneas", order_crud.insert_line_items(self.db, order_id, items))

    async def delete_line_items(self, order_id: int) -> int:
        return await self._step("borrar líneas", order_crud.delete_line_items(self.db, order_id))

    async def delete_order(self, order_id: int) -> None:
        """Elimina un pedido y sus líneas como una única escritura de pedido."""
        async with self.order_write("eliminar pedido"):
            await self.delete_line_items(order_id)
            deleted = await self._step("borrar pedido", order_crud.delete_order(self.db, order_id))
            if not deleted:
                raise NotFoundError("Pedido", order_id)

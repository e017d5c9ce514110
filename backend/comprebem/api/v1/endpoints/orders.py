# backend/comprebem/api/v1/endpoints/orders.py

"""
Endpoints REST para la gestión de pedidos.

La creación y la edición pasan por OrderComposer: el formulario solo aporta
cliente, fecha y pares producto/cantidad; los precios de las líneas y el
total los calcula el servidor.
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from comprebem.api import deps
from comprebem.schemas import order_schema
from comprebem.services import export_service
from comprebem.services.filter_service import filter_orders
from comprebem.services.order_composition import OrderComposer
from comprebem.services.repository import EntityRepository

logger = logging.getLogger(__name__)
router = APIRouter()


async def _composer(repository: EntityRepository) -> OrderComposer:
    """Composer con los catálogos seleccionables: clientes y productos activos."""
    products = await repository.list_products(active=True)
    clients = await repository.list_clients(active=True)
    return OrderComposer(products, clients)


async def _list_filtered(repository: EntityRepository, search: Optional[str], sort_by: str, order: str):
    try:
        orders = await repository.list_orders(sort_by=sort_by, descending=order == "desc")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return filter_orders(orders, search)


@router.get("/", response_model=List[order_schema.OrderResponse])
async def read_orders(
    repository: EntityRepository = Depends(deps.get_repository),
    search: Optional[str] = None,
    sort_by: str = "created_at",
    order: str = Query(default="desc", pattern="^(asc|desc)$"),
) -> List[order_schema.OrderResponse]:
    """Lista los pedidos con sus líneas, con búsqueda y ordenación."""
    orders = await _list_filtered(repository, search, sort_by, order)
    logger.debug(f"📋 PEDIDOS: {len(orders)} resultados")
    return orders


@router.get("/export")
async def export_orders(
    repository: EntityRepository = Depends(deps.get_repository),
    format: str = Query(default="csv", pattern="^(csv|pdf)$", description=export_service.FORMAT_DESCRIPTION),
    search: Optional[str] = None,
    sort_by: str = "created_at",
    order: str = Query(default="desc", pattern="^(asc|desc)$"),
) -> Response:
    """Exporta el listado filtrado de pedidos a hoja de cálculo CSV o a PDF."""
    orders = await _list_filtered(repository, search, sort_by, order)
    if format == "pdf":
        content = export_service.export_printable(
            export_service.ORDER_COLUMNS, export_service.order_printable_rows(orders), "pedidos"
        )
        return Response(content, media_type=export_service.PDF_MEDIA_TYPE,
                        headers=export_service.attachment_headers("pedidos.pdf"))
    content = export_service.export_tabular(
        export_service.order_rows(orders), "pedidos", export_service.ORDER_COLUMNS
    )
    return Response(content, media_type=export_service.CSV_MEDIA_TYPE,
                    headers=export_service.attachment_headers(export_service.spreadsheet_filename("pedidos")))


@router.post(
    "/",
    response_model=order_schema.OrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": order_schema.ValidationErrorResponse}},
)
async def create_order(
    *,
    repository: EntityRepository = Depends(deps.get_repository),
    order_in: order_schema.OrderInput,
) -> order_schema.OrderResponse:
    """Crea un pedido en estado 'Pending' con el precio vigente de cada producto."""
    logger.info(f"🆕 PEDIDO: Creando pedido para el cliente {order_in.client_id}")
    composer = await _composer(repository)
    draft = composer.init_draft()
    draft = composer.set_client(draft, order_in.client_id)
    if order_in.created_at is not None:
        draft = composer.set_date(draft, order_in.created_at)
    draft = composer.apply_line_items(draft, order_in.items)
    order_id = await composer.submit(draft, repository)
    return await repository.get_order(order_id)


@router.get("/{order_id}", response_model=order_schema.OrderResponse)
async def read_order(
    order_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
) -> order_schema.OrderResponse:
    return await repository.get_order(order_id)


@router.put(
    "/{order_id}",
    response_model=order_schema.OrderResponse,
    responses={422: {"model": order_schema.ValidationErrorResponse}},
)
async def update_order(
    *,
    order_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
    order_in: order_schema.OrderInput,
) -> order_schema.OrderResponse:
    """
    Edita un pedido. Las líneas que conservan su producto mantienen el precio
    con el que se guardaron; las que cambian de producto toman el vigente.
    """
    logger.info(f"🔄 PEDIDO: Editando pedido {order_id}")
    existing = await repository.get_order(order_id)
    composer = await _composer(repository)
    draft = composer.init_draft(existing)
    draft = composer.set_client(draft, order_in.client_id)
    if order_in.created_at is not None:
        draft = composer.set_date(draft, order_in.created_at)
    draft = composer.apply_line_items(draft, order_in.items)
    await composer.submit(draft, repository)
    return await repository.get_order(order_id)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
) -> None:
    """Elimina el pedido y sus líneas."""
    logger.info(f"🗑️ PEDIDO: Eliminando pedido {order_id}")
    await repository.delete_order(order_id)

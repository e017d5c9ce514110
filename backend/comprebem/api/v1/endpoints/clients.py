# backend/comprebem/api/v1/endpoints/clients.py

"""
Endpoints REST para la gestión de clientes.
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from comprebem.api import deps
from comprebem.schemas import client_schema
from comprebem.services import export_service
from comprebem.services.filter_service import filter_clients
from comprebem.services.repository import EntityRepository

logger = logging.getLogger(__name__)
router = APIRouter()


async def _list_filtered(repository: EntityRepository, search: Optional[str], sort_by: str, order: str):
    try:
        clients = await repository.list_clients(active=True, sort_by=sort_by, descending=order == "desc")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return filter_clients(clients, search)


@router.get("/", response_model=List[client_schema.ClientResponse])
async def read_clients(
    repository: EntityRepository = Depends(deps.get_repository),
    search: Optional[str] = None,
    sort_by: str = "name",
    order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> List[client_schema.ClientResponse]:
    """Lista los clientes activos, con búsqueda y ordenación."""
    clients = await _list_filtered(repository, search, sort_by, order)
    logger.debug(f"📋 CLIENTES: {len(clients)} resultados")
    return clients


@router.get("/export")
async def export_clients(
    repository: EntityRepository = Depends(deps.get_repository),
    format: str = Query(default="csv", pattern="^(csv|pdf)$", description=export_service.FORMAT_DESCRIPTION),
    search: Optional[str] = None,
    sort_by: str = "name",
    order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> Response:
    """Exporta el listado filtrado de clientes a hoja de cálculo CSV o a PDF."""
    clients = await _list_filtered(repository, search, sort_by, order)
    if format == "pdf":
        content = export_service.export_printable(
            export_service.CLIENT_HEADERS, export_service.client_printable_rows(clients), "clientes"
        )
        return Response(content, media_type=export_service.PDF_MEDIA_TYPE,
                        headers=export_service.attachment_headers("clientes.pdf"))
    content = export_service.export_tabular(
        export_service.client_rows(clients), "clientes", export_service.CLIENT_COLUMNS
    )
    return Response(content, media_type=export_service.CSV_MEDIA_TYPE,
                    headers=export_service.attachment_headers(export_service.spreadsheet_filename("clientes")))


@router.post("/", response_model=client_schema.ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    *,
    repository: EntityRepository = Depends(deps.get_repository),
    client_in: client_schema.ClientCreate,
) -> client_schema.ClientResponse:
    logger.info(f"🆕 CLIENTE: Creando cliente '{client_in.name}'")
    client = await repository.insert_client(client_in.model_dump())
    logger.info(f"✅ CLIENTE: Creado con id {client.id}")
    return client


@router.get("/{client_id}", response_model=client_schema.ClientResponse)
async def read_client(
    client_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
) -> client_schema.ClientResponse:
    """Obtiene un cliente por id, también si está desactivado."""
    return await repository.get_client(client_id)


@router.put("/{client_id}", response_model=client_schema.ClientResponse)
async def update_client(
    *,
    client_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
    client_in: client_schema.ClientUpdate,
) -> client_schema.ClientResponse:
    logger.info(f"🔄 CLIENTE: Actualizando cliente {client_id}")
    return await repository.update_client(client_id, client_in.model_dump(exclude_unset=True))


@router.delete("/{client_id}", response_model=client_schema.ClientResponse)
async def delete_client(
    client_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
) -> client_schema.ClientResponse:
    """Desactiva el cliente. Sus pedidos históricos se conservan."""
    logger.info(f"🗑️ CLIENTE: Desactivando cliente {client_id}")
    return await repository.soft_delete_client(client_id)

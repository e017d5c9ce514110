# backend/comprebem/api/v1/endpoints/products.py

"""
Endpoints REST para la gestión del catálogo de productos.
"""

from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from comprebem.api import deps
from comprebem.core.config import settings
from comprebem.db.models.product_model import Product
from comprebem.schemas import product_schema
from comprebem.services import export_service
from comprebem.services.filter_service import filter_products
from comprebem.services.metrics import expiration_status
from comprebem.services.repository import EntityRepository

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_response(product: Product, today: date) -> product_schema.ProductResponse:
    """Serializa el producto añadiendo su estado de caducidad."""
    response = product_schema.ProductResponse.model_validate(product)
    expiration = expiration_status(product.expiration_date, today, settings.EXPIRING_SOON_DAYS)
    response.expiration = product_schema.ExpirationStatusResponse(**expiration._asdict())
    return response


async def _list_filtered(repository: EntityRepository, search: Optional[str], sort_by: str, order: str):
    try:
        products = await repository.list_products(active=True, sort_by=sort_by, descending=order == "desc")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return filter_products(products, search)


@router.get("/", response_model=List[product_schema.ProductResponse])
async def read_products(
    repository: EntityRepository = Depends(deps.get_repository),
    search: Optional[str] = None,
    sort_by: str = "name",
    order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> List[product_schema.ProductResponse]:
    """Lista los productos activos con su estado de caducidad."""
    products = await _list_filtered(repository, search, sort_by, order)
    logger.debug(f"📋 PRODUCTOS: {len(products)} resultados")
    today = date.today()
    return [_to_response(product, today) for product in products]


@router.get("/export")
async def export_products(
    repository: EntityRepository = Depends(deps.get_repository),
    format: str = Query(default="csv", pattern="^(csv|pdf)$", description=export_service.FORMAT_DESCRIPTION),
    search: Optional[str] = None,
    sort_by: str = "name",
    order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> Response:
    """Exporta el listado filtrado de productos a hoja de cálculo CSV o a PDF."""
    products = await _list_filtered(repository, search, sort_by, order)
    if format == "pdf":
        content = export_service.export_printable(
            export_service.PRODUCT_HEADERS,
            export_service.product_printable_rows(products, date.today()),
            "produtos",
        )
        return Response(content, media_type=export_service.PDF_MEDIA_TYPE,
                        headers=export_service.attachment_headers("produtos.pdf"))
    content = export_service.export_tabular(
        export_service.product_rows(products), "produtos", export_service.PRODUCT_COLUMNS
    )
    return Response(content, media_type=export_service.CSV_MEDIA_TYPE,
                    headers=export_service.attachment_headers(export_service.spreadsheet_filename("produtos")))


@router.post("/", response_model=product_schema.ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    repository: EntityRepository = Depends(deps.get_repository),
    product_in: product_schema.ProductCreate,
) -> product_schema.ProductResponse:
    """Crea un nuevo producto en el catálogo."""
    logger.info(f"🆕 PRODUCTO: Creando producto '{product_in.name}'")
    product = await repository.insert_product(product_in.model_dump())
    logger.info(f"✅ PRODUCTO: Creado con id {product.id}")
    return _to_response(product, date.today())


@router.get("/{product_id}", response_model=product_schema.ProductResponse)
async def read_product(
    product_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
) -> product_schema.ProductResponse:
    """Obtiene un producto por id, también si está desactivado."""
    product = await repository.get_product(product_id)
    return _to_response(product, date.today())


@router.put("/{product_id}", response_model=product_schema.ProductResponse)
async def update_product(
    *,
    product_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
    product_in: product_schema.ProductUpdate,
) -> product_schema.ProductResponse:
    """Actualiza un producto. Los pedidos ya guardados mantienen su precio."""
    logger.info(f"🔄 PRODUCTO: Actualizando producto {product_id}")
    product = await repository.update_product(product_id, product_in.model_dump(exclude_unset=True))
    return _to_response(product, date.today())


@router.delete("/{product_id}", response_model=product_schema.ProductResponse)
async def delete_product(
    product_id: int,
    repository: EntityRepository = Depends(deps.get_repository),
) -> product_schema.ProductResponse:
    """Desactiva el producto. Las líneas de pedidos históricos se conservan."""
    logger.info(f"🗑️ PRODUCTO: Desactivando producto {product_id}")
    product = await repository.soft_delete_product(product_id)
    return _to_response(product, date.today())

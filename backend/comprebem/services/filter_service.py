# backend/comprebem/services/filter_service.py
"""
Búsqueda de texto sobre listados ya cargados y etiquetas de presentación.

La consola filtra en memoria lo que ya ha leído de la base de datos (los
listados son pequeños). Las etiquetas degradan con elegancia cuando un
pedido apunta a un cliente o producto que ya no se puede resolver.
"""

from typing import Any, Iterable, List, Optional

from comprebem.schemas.order_schema import CLIENT_REMOVED_LABEL, PRODUCT_REMOVED_LABEL
from comprebem.services.metrics import format_date


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


# ========================================
# ETIQUETAS
# ========================================

def client_label(order: Any) -> str:
    return order.client.name if order.client is not None else CLIENT_REMOVED_LABEL


def line_item_label(item: Any) -> str:
    name = item.product.name if item.product is not None else PRODUCT_REMOVED_LABEL
    return f"{name} ({item.quantity})"


def order_products_label(order: Any, separator: str = ", ") -> str:
    return separator.join(line_item_label(item) for item in order.items)


# ========================================
# FILTROS
# ========================================

def filter_clients(clients: Iterable[Any], term: Optional[str]) -> List[Any]:
    """Coincidencia por nombre o email (sin distinguir mayúsculas) o por CPF/CNPJ."""
    clients = list(clients)
    if not term:
        return clients
    lowered = term.lower()
    return [
        client for client in clients
        if _contains(client.name, lowered)
        or (client.tax_id and term in client.tax_id)
        or _contains(client.email, lowered)
    ]


def filter_products(products: Iterable[Any], term: Optional[str]) -> List[Any]:
    """Coincidencia por nombre o por el texto del precio o del stock."""
    products = list(products)
    if not term:
        return products
    lowered = term.lower()
    return [
        product for product in products
        if _contains(product.name, lowered)
        or term in str(product.unit_price)
        or term in str(product.stock_quantity)
    ]


def filter_orders(orders: Iterable[Any], term: Optional[str]) -> List[Any]:
    """
    Coincidencia por nombre del cliente, nombres de productos o fecha
    (dd/mm/aaaa). Los pedidos cuyo cliente ya no existe nunca coinciden.
    """
    lowered = (term or "").lower()
    matches = []
    for order in orders:
        if order.client is None:
            continue
        product_names = ", ".join(item.product.name.lower() for item in order.items if item.product is not None)
        if (
            lowered in order.client.name.lower()
            or lowered in product_names
            or (term or "") in format_date(order.created_at)
        ):
            matches.append(order)
    return matches

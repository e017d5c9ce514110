# backend/comprebem/services/metrics.py
"""
Cálculo de indicadores derivados para el dashboard.

Funciones puras y sin estado: reciben las colecciones ya leídas de la base
de datos (pedidos, líneas, productos) y devuelven cifras agregadas. No
acceden a la base de datos ni modifican sus argumentos.
"""

import enum
from collections import OrderedDict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

CENT = Decimal("0.01")

GROWTH_NEW = "new"
GROWTH_ZERO = "0.00%"
TOP_PRODUCT_NONE = "None"
TOP_PRODUCT_NOT_FOUND = "not found"
NO_DATE_TEXT = "N/A"
DATE_FORMAT = "%d/%m/%Y"


def format_date(value: date) -> str:
    """Formato de fecha fijo de la consola (dd/mm/aaaa)."""
    return value.strftime(DATE_FORMAT)


# ========================================
# INGRESOS Y CRECIMIENTO
# ========================================

def total_revenue(orders: Iterable[Any]) -> Decimal:
    """Suma de `total_amount` de todos los pedidos."""
    return sum((Decimal(order.total_amount) for order in orders), Decimal("0.00"))


def _previous_month(today: date) -> tuple:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def _revenue_in_month(orders: Iterable[Any], year: int, month: int) -> Decimal:
    return total_revenue(
        order for order in orders
        if order.created_at.year == year and order.created_at.month == month
    )


def month_over_month_growth(orders: Iterable[Any], today: date) -> str:
    """
    Crecimiento de ingresos del mes natural actual frente al anterior.

    Devuelve un porcentaje con dos decimales ("12.50%", "-3.10%"). Si el mes
    anterior no tuvo ingresos no se divide: devuelve GROWTH_NEW cuando el mes
    actual sí tiene ingresos y GROWTH_ZERO cuando tampoco los tiene.
    """
    orders = list(orders)
    current = _revenue_in_month(orders, today.year, today.month)
    previous_year, previous_month = _previous_month(today)
    previous = _revenue_in_month(orders, previous_year, previous_month)

    if previous <= 0:
        return GROWTH_NEW if current > 0 else GROWTH_ZERO

    growth = ((current - previous) / previous * 100).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{growth}%"


# ========================================
# PRODUCTO MÁS VENDIDO
# ========================================

def top_product(line_items: Iterable[Any], products: Iterable[Any]) -> str:
    """
    Nombre del producto con mayor cantidad vendida sumando todas las líneas.

    Solo una suma estrictamente mayor desplaza al líder, así que en caso de
    empate gana el producto cuyas líneas aparecen primero en `line_items`.
    Devuelve TOP_PRODUCT_NOT_FOUND si el id ya no corresponde a ningún
    producto y TOP_PRODUCT_NONE si no hay líneas.
    """
    quantities: Dict[Optional[int], int] = OrderedDict()
    for item in line_items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

    top_id = None
    top_quantity = 0
    for product_id, quantity in quantities.items():
        if quantity > top_quantity:
            top_id, top_quantity = product_id, quantity

    if not quantities:
        return TOP_PRODUCT_NONE

    names = {product.id: product.name for product in products}
    return names.get(top_id, TOP_PRODUCT_NOT_FOUND)


# ========================================
# CADUCIDAD DE PRODUCTOS
# ========================================

class ExpirationBand(str, enum.Enum):
    NO_DATE = "NoDate"
    EXPIRED = "Expired"
    EXPIRING_SOON = "ExpiringSoon"
    NORMAL = "Normal"


class ExpirationStatus(NamedTuple):
    band: ExpirationBand
    days_until: Optional[int]
    text: str


def expiration_status(expiration_date: Optional[date], today: date, soon_days: int = 7) -> ExpirationStatus:
    """
    Clasifica una fecha de caducidad respecto a `today`.

    Ambas son fechas sin hora, así que la diferencia ya está en días enteros.
    Caducado si faltan menos de 0 días, por caducar entre 0 y `soon_days`
    (ambos incluidos) y normal a partir de ahí.
    """
    if expiration_date is None:
        return ExpirationStatus(ExpirationBand.NO_DATE, None, NO_DATE_TEXT)

    days = (expiration_date - today).days
    formatted = format_date(expiration_date)

    if days < 0:
        return ExpirationStatus(ExpirationBand.EXPIRED, days, f"{formatted} (Expired)")
    if days <= soon_days:
        return ExpirationStatus(ExpirationBand.EXPIRING_SOON, days, f"{formatted} (Expires in {days}d)")
    return ExpirationStatus(ExpirationBand.NORMAL, days, formatted)


# ========================================
# RESUMEN DEL DASHBOARD
# ========================================

def recent_orders(orders: Iterable[Any], limit: int = 5) -> List[Any]:
    """Los `limit` pedidos más recientes por fecha (y por id dentro del mismo día)."""
    return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)[:limit]


def dashboard_summary(
    products_count: int,
    clients_count: int,
    orders: Iterable[Any],
    line_items: Iterable[Any],
    products: Iterable[Any],
    today: date,
    recent_limit: int = 5,
) -> Dict[str, Any]:
    """Reúne todos los indicadores del dashboard en un diccionario."""
    orders = list(orders)
    return {
        "total_products": products_count,
        "total_clients": clients_count,
        "total_orders": len(orders),
        "total_revenue": total_revenue(orders),
        "month_over_month_growth": month_over_month_growth(orders, today),
        "top_product": top_product(line_items, products),
        "recent_orders": recent_orders(orders, recent_limit),
    }

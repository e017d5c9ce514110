# backend/comprebem/schemas/order_schema.py
"""
Se encarga de definir los esquemas Pydantic para los pedidos, sus líneas
y el borrador de pedido que maneja el servicio de composición.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from comprebem.core.exceptions import ValidationRule
from .client_schema import ClientSummary
from .product_schema import ProductSummary

PRODUCT_REMOVED_LABEL = "Product removed"
CLIENT_REMOVED_LABEL = "Client removed"

# ========================================
# BORRADOR DE PEDIDO (EN MEMORIA)
# ========================================

class DraftLineItem(BaseModel):
    """Línea de un borrador: producto, cantidad y precio capturado."""
    product_id: Optional[int] = None
    quantity: int = 1
    unit_price_at_order_time: Decimal = Decimal("0")


class OrderDraft(BaseModel):
    """
    Representación en memoria de un pedido que se está creando o editando.
    `order_id` es None mientras el pedido no existe en la base de datos.
    """
    order_id: Optional[int] = None
    client_id: Optional[int] = None
    created_at: date
    line_items: List[DraftLineItem] = []
    total_amount: Decimal = Decimal("0.00")

    @property
    def is_new(self) -> bool:
        return self.order_id is None


class ValidationResult(BaseModel):
    """Resultado de validar un borrador: la primera regla incumplida, si hay."""
    rule: Optional[ValidationRule] = None

    @property
    def is_valid(self) -> bool:
        return self.rule is None


# ========================================
# ESQUEMAS DE ENTRADA
# ========================================

class OrderItemInput(BaseModel):
    """Línea enviada desde el formulario: producto y cantidad."""
    product_id: Optional[int] = Field(None, description="ID del producto")
    quantity: int = Field(1, description="Cantidad del producto")


class OrderInput(BaseModel):
    """
    Formulario de creación o edición de un pedido. Las reglas de negocio
    (cliente requerido, al menos una línea, cantidades positivas) las aplica
    el servicio de composición, no este esquema.
    """
    client_id: Optional[int] = Field(None, description="ID del cliente")
    created_at: Optional[date] = Field(None, description="Fecha del pedido; hoy por defecto")
    items: List[OrderItemInput] = Field(default_factory=list, description="Líneas del pedido")


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class OrderItemResponse(BaseModel):
    """Línea de pedido guardada, con el producto si todavía existe."""
    id: int
    product_id: Optional[int] = None
    quantity: int
    unit_price_at_order_time: Decimal
    product: Optional[ProductSummary] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Esquema completo de respuesta para un pedido."""
    id: int
    client_id: int
    created_at: date
    status: str
    total_amount: Decimal
    client: Optional[ClientSummary] = None
    items: List[OrderItemResponse] = []

    model_config = ConfigDict(from_attributes=True)


class ValidationErrorResponse(BaseModel):
    detail: str
    rule: ValidationRule

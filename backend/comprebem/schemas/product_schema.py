# backend/comprebem/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from comprebem.services.metrics import ExpirationBand
from .client_schema import clean_required_name


# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1, max_length=255)
    unit_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    expiration_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_name(v)


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un nuevo producto. Siempre se crea activo."""
    pass


class ProductUpdate(BaseModel):
    """
    Esquema para actualizar un producto. Todos los campos son opcionales;
    solo la fecha de caducidad admite null (la elimina).
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0)
    expiration_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_name(v)

    @field_validator("unit_price", "stock_quantity")
    @classmethod
    def validate_not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} no puede ser null")
        return v


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class ExpirationStatusResponse(BaseModel):
    """Estado de validez calculado para la fecha de caducidad."""
    band: ExpirationBand
    days_until: Optional[int] = None
    text: str


class ProductResponse(ProductBase):
    """Esquema de respuesta para un producto."""
    id: int
    active: bool
    expiration: Optional[ExpirationStatusResponse] = None

    model_config = ConfigDict(from_attributes=True)


class ProductSummary(BaseModel):
    """Referencia mínima a un producto dentro de una línea de pedido."""
    id: int
    name: str
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)

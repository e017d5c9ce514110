# backend/comprebem/schemas/client_schema.py
"""
Se encarga de definir los esquemas Pydantic para el modelo Client.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def clean_required_name(v: Optional[str]) -> str:
    """Recorta el nombre y rechaza nulos o nombres en blanco."""
    if v is None or not v.strip():
        raise ValueError("El nombre es requerido")
    return v.strip()


class ClientBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de cliente."""
    name: str = Field(..., min_length=1, max_length=255, description="Nombre o razón social")
    tax_id: Optional[str] = Field(None, max_length=20, description="CPF/CNPJ")
    email: EmailStr = Field(..., description="Email de contacto")
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_name(v)


class ClientCreate(ClientBase):
    """Esquema para crear un cliente. Siempre se crea activo."""
    pass


class ClientUpdate(BaseModel):
    """
    Esquema para actualizar un cliente. Todos los campos son opcionales, pero
    nombre y email no se pueden vaciar: omitirlos los deja como estaban.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    tax_id: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_name(v)

    @field_validator("email")
    @classmethod
    def validate_email_not_null(cls, v):
        if v is None:
            raise ValueError("El email es requerido")
        return v


class ClientResponse(ClientBase):
    """Esquema de respuesta para un cliente."""
    id: int
    active: bool

    model_config = ConfigDict(from_attributes=True)


class ClientSummary(BaseModel):
    """Referencia mínima a un cliente dentro de un pedido."""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)

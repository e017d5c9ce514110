# backend/comprebem/db/models/client_model.py
"""
Se encarga de definir el modelo de cliente para la aplicación.
"""

from sqlalchemy import Boolean, Column, Integer, String, true
from sqlalchemy.orm import relationship
from comprebem.db.database import Base

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    tax_id = Column(String(20), nullable=True)  # CPF/CNPJ
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    # Borrado lógico: los clientes nunca se eliminan físicamente
    active = Column(Boolean, nullable=False, default=True, server_default=true())

    # Relación con los pedidos (sin cascada: el historial se conserva)
    orders = relationship("Order", back_populates="client")

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}', active={self.active})>"

# backend/comprebem/db/models/order_model.py
"""
Este archivo contiene los modelos de pedido y de línea de pedido.
"""

from sqlalchemy import (
    CheckConstraint, Column, Date, ForeignKey, Integer, Numeric, String
)
from sqlalchemy.orm import relationship

from comprebem.db.database import Base
# Registra Client y Product para resolver las relaciones por nombre
from comprebem.db.models import client_model, product_model  # noqa: F401

ORDER_STATUS_PENDING = "Pending"

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    created_at = Column(Date, nullable=False)
    status = Column(String(50), nullable=False, default=ORDER_STATUS_PENDING)
    # Derivado: siempre igual a la suma de las líneas en el momento de guardar
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)

    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")
    client = relationship("Client", back_populates="orders")

    def __repr__(self):
        return f"<Order(id={self.id}, client_id={self.client_id}, total={self.total_amount})>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    # Referencia débil: si el producto desaparece la línea se conserva
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)
    # Precio capturado al elegir el producto; no cambia con el precio del catálogo
    unit_price_at_order_time = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
    )

    def __repr__(self):
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, product_id={self.product_id})>"

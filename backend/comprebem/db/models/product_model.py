# backend/comprebem/db/models/product_model.py
"""
Se encarga de definir el modelo de producto para la aplicación.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, Integer, Numeric, String, true

from comprebem.db.database import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    # Precio vigente; los pedidos guardan su propia copia en cada línea
    unit_price = Column(Numeric(10, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    expiration_date = Column(Date, nullable=True)
    active = Column(Boolean, nullable=False, default=True, server_default=true())

    __table_args__ = (
        CheckConstraint("unit_price >= 0", name="ck_products_unit_price_non_negative"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', unit_price={self.unit_price})>"


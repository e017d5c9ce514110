"""
Factories for the console entities: clients, products, orders and line items.
"""

import factory
from datetime import date
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession

from comprebem.db.models.client_model import Client
from comprebem.db.models.order_model import Order, OrderItem, ORDER_STATUS_PENDING
from comprebem.db.models.product_model import Product


class AsyncFactoryMixin:
    """Adds create_async() to a factory-boy factory."""

    @classmethod
    async def create_async(cls, db_session: AsyncSession, **kwargs):
        """
        Build the instance and flush it to get its id.

        The caller decides when to commit.
        """
        instance = cls.build(**kwargs)
        db_session.add(instance)
        await db_session.flush()
        return instance


class ClientFactory(AsyncFactoryMixin, factory.Factory):
    class Meta:
        model = Client

    name = factory.Sequence(lambda n: f"Cliente {n}")
    tax_id = factory.Sequence(lambda n: f"{n:011d}")
    email = factory.Sequence(lambda n: f"cliente{n}@mercado.com.br")
    phone = "(11) 99999-0000"
    active = True


class ProductFactory(AsyncFactoryMixin, factory.Factory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f"Produto {n}")
    unit_price = Decimal("10.00")
    stock_quantity = 100
    expiration_date = None
    active = True


class OrderFactory(AsyncFactoryMixin, factory.Factory):
    """Order row only; the total must be set to match the line items."""

    class Meta:
        model = Order

    created_at = factory.LazyFunction(date.today)
    status = ORDER_STATUS_PENDING
    total_amount = Decimal("0.00")


class OrderItemFactory(AsyncFactoryMixin, factory.Factory):
    class Meta:
        model = OrderItem

    quantity = 1
    unit_price_at_order_time = Decimal("10.00")

"""
Data factories for test data generation.

Factories use factory-boy to create realistic test data with sensible defaults.
All factories support async creation via create_async() method.

Usage:
    from tests.factories import ClientFactory, ProductFactory, OrderFactory

    client = await ClientFactory.create_async(db_session, name="Ana Souza")
    product = await ProductFactory.create_async(db_session, unit_price=Decimal("2.50"))
"""

from tests.factories.entities import ClientFactory, OrderFactory, OrderItemFactory, ProductFactory

__all__ = [
    "ClientFactory",
    "ProductFactory",
    "OrderFactory",
    "OrderItemFactory",
]

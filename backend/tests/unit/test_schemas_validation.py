"""
Unit tests for Pydantic schema validation.
"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from comprebem.schemas.client_schema import ClientCreate, ClientUpdate
from comprebem.schemas.order_schema import OrderInput
from comprebem.schemas.product_schema import ProductCreate, ProductUpdate


class TestClientSchemas:

    def test_name_is_stripped(self):
        client = ClientCreate(name="  Ana Souza ", email="ana@mercado.com")

        assert client.name == "Ana Souza"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            ClientCreate(name="   ", email="ana@mercado.com")

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            ClientCreate(name="Ana", email="not-an-email")

    @pytest.mark.parametrize("payload", [{"name": None}, {"email": None}, {"name": "   "}])
    def test_update_rejects_clearing_required_fields(self, payload):
        with pytest.raises(ValidationError):
            ClientUpdate(**payload)

    def test_update_name_is_stripped(self):
        assert ClientUpdate(name=" Ana ").name == "Ana"

    def test_update_only_dumps_set_fields(self):
        patch = ClientUpdate(phone="1234").model_dump(exclude_unset=True)

        assert patch == {"phone": "1234"}


class TestProductSchemas:

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="Arroz", unit_price=Decimal("-1"))

    def test_more_than_two_decimals_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="Arroz", unit_price=Decimal("1.999"))

    def test_defaults(self):
        product = ProductCreate(name="Arroz", unit_price=Decimal("5"))

        assert product.stock_quantity == 0
        assert product.expiration_date is None

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="  ", unit_price=Decimal("5"))

    @pytest.mark.parametrize("payload", [
        {"name": None},
        {"unit_price": None},
        {"stock_quantity": None},
        {"name": "\t "},
    ])
    def test_update_rejects_clearing_required_fields(self, payload):
        with pytest.raises(ValidationError):
            ProductUpdate(**payload)

    def test_update_allows_clearing_expiration_date(self):
        patch = ProductUpdate(expiration_date=None).model_dump(exclude_unset=True)

        assert patch == {"expiration_date": None}


class TestOrderInput:

    def test_business_rules_are_not_enforced_by_schema(self):
        order = OrderInput(items=[{"product_id": None, "quantity": 0}])

        assert order.client_id is None
        assert order.created_at is None
        assert order.items[0].quantity == 0

    def test_items_default_to_empty(self):
        assert OrderInput(client_id=1).items == []

"""
Unit tests for comprebem/services/order_composition.py

Tests draft operations, the total invariant, price snapshots, validation
gating and the submit sequence against a recording fake repository.
"""

import pytest
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from comprebem.core.exceptions import DraftError, OrderValidationError, ValidationRule
from comprebem.schemas.order_schema import OrderItemInput
from comprebem.services.order_composition import OrderComposer


PRODUCT_A = SimpleNamespace(id=1, name="Arroz", unit_price=Decimal("5.00"))
PRODUCT_B = SimpleNamespace(id=2, name="Feijão", unit_price=Decimal("3.50"))
CLIENT_C = SimpleNamespace(id=10, name="Maria")


class RecordingRepository:
    """Fake repository that records every call made by submit()."""

    def __init__(self, new_order_id: int = 99):
        self.calls = []
        self.new_order_id = new_order_id

    @asynccontextmanager
    async def order_write(self, operation):
        self.calls.append(("order_write", operation))
        yield

    async def insert_order(self, client_id, created_at, total_amount):
        self.calls.append(("insert_order", client_id, created_at, total_amount))
        return SimpleNamespace(id=self.new_order_id)

    async def update_order(self, order_id, patch):
        self.calls.append(("update_order", order_id, patch))
        return SimpleNamespace(id=order_id)

    async def delete_line_items(self, order_id):
        self.calls.append(("delete_line_items", order_id))
        return 2

    async def insert_line_items(self, order_id, items):
        items = list(items)
        self.calls.append(("insert_line_items", order_id, items))
        return items


@pytest.fixture
def composer():
    return OrderComposer([PRODUCT_A, PRODUCT_B], [CLIENT_C])


def _draft_a2_b1(composer):
    draft = composer.init_draft(today=date(2024, 5, 10))
    draft = composer.set_client(draft, CLIENT_C.id)
    draft = composer.add_line_item(draft)
    draft = composer.set_line_item_product(draft, 0, PRODUCT_A.id)
    draft = composer.set_line_item_quantity(draft, 0, 2)
    draft = composer.add_line_item(draft)
    draft = composer.set_line_item_product(draft, 1, PRODUCT_B.id)
    return draft


class TestDraftOperations:
    """Test draft creation and line item mutations."""

    def test_new_draft_is_empty(self, composer):
        draft = composer.init_draft(today=date(2024, 5, 10))

        assert draft.is_new
        assert draft.client_id is None
        assert draft.created_at == date(2024, 5, 10)
        assert draft.line_items == []
        assert draft.total_amount == Decimal("0.00")

    def test_add_line_item_defaults(self, composer):
        draft = composer.add_line_item(composer.init_draft())

        line = draft.line_items[0]
        assert line.product_id is None
        assert line.quantity == 1
        assert line.unit_price_at_order_time == Decimal("0")

    def test_set_product_captures_current_price(self, composer):
        draft = _draft_a2_b1(composer)

        assert draft.line_items[0].unit_price_at_order_time == Decimal("5.00")
        assert draft.line_items[1].unit_price_at_order_time == Decimal("3.50")
        assert draft.total_amount == Decimal("13.50")

    def test_operations_do_not_mutate_input_draft(self, composer):
        draft = composer.add_line_item(composer.init_draft())
        composer.set_line_item_product(draft, 0, PRODUCT_A.id)

        assert draft.line_items[0].product_id is None

    def test_unknown_product_clears_line(self, composer):
        draft = _draft_a2_b1(composer)
        draft = composer.set_line_item_product(draft, 0, 404)

        assert draft.line_items[0].product_id is None
        assert draft.line_items[0].unit_price_at_order_time == Decimal("0")
        assert draft.line_items[0].quantity == 2
        assert composer.validate(draft).rule == ValidationRule.INVALID_LINE_ITEM

    def test_remove_line_item_recomputes(self, composer):
        draft = composer.remove_line_item(_draft_a2_b1(composer), 0)

        assert len(draft.line_items) == 1
        assert draft.total_amount == Decimal("3.50")

    def test_out_of_range_index_raises(self, composer):
        draft = composer.init_draft()

        with pytest.raises(DraftError):
            composer.set_line_item_quantity(draft, 0, 3)
        with pytest.raises(DraftError):
            composer.remove_line_item(draft, -1)

    def test_unselectable_client_is_cleared(self, composer):
        draft = composer.set_client(composer.init_draft(), 55)

        assert draft.client_id is None

    def test_existing_client_is_kept_even_if_inactive(self, composer):
        existing = SimpleNamespace(id=7, client_id=55, created_at=date(2024, 1, 2), items=[])
        draft = composer.init_draft(existing)

        assert composer.set_client(draft, 55).client_id == 55


class TestTotalInvariant:
    """Test that the total always equals the rounded sum of the lines."""

    @pytest.mark.parametrize("lines,expected", [
        ([], Decimal("0.00")),
        ([(3, "0.10")], Decimal("0.30")),
        ([(1, "0.005")], Decimal("0.01")),
        ([(2, "5.00"), (1, "3.50")], Decimal("13.50")),
        ([(7, "1.99"), (3, "12.345")], Decimal("50.97")),
    ])
    def test_recompute_total(self, composer, lines, expected):
        draft = composer.init_draft()
        for quantity, price in lines:
            draft = composer.add_line_item(draft)
            index = len(draft.line_items) - 1
            line = draft.line_items[index].model_copy(
                update={"quantity": quantity, "unit_price_at_order_time": Decimal(price)}
            )
            draft = draft.model_copy(update={"line_items": [*draft.line_items[:index], line]})

        assert composer.recompute_total(draft).total_amount == expected

    def test_quantity_change_updates_total(self, composer):
        draft = composer.set_line_item_quantity(_draft_a2_b1(composer), 0, 3)

        assert draft.total_amount == Decimal("18.50")


class TestEditDraft:
    """Test drafts seeded from a saved order."""

    def _saved_order(self):
        return SimpleNamespace(
            id=5,
            client_id=CLIENT_C.id,
            created_at=date(2024, 5, 1),
            items=[
                SimpleNamespace(product_id=PRODUCT_A.id, quantity=2, unit_price_at_order_time=Decimal("4.00")),
                SimpleNamespace(product_id=PRODUCT_B.id, quantity=1, unit_price_at_order_time=Decimal("3.50")),
            ],
        )

    def test_init_from_order_keeps_stored_prices(self, composer):
        draft = composer.init_draft(self._saved_order())

        assert draft.order_id == 5
        assert not draft.is_new
        assert draft.line_items[0].unit_price_at_order_time == Decimal("4.00")
        assert draft.total_amount == Decimal("11.50")

    def test_apply_line_items_keeps_snapshot_for_unchanged_product(self, composer):
        draft = composer.init_draft(self._saved_order())
        draft = composer.apply_line_items(draft, [
            OrderItemInput(product_id=PRODUCT_A.id, quantity=3),
            OrderItemInput(product_id=PRODUCT_B.id, quantity=1),
        ])

        assert draft.line_items[0].unit_price_at_order_time == Decimal("4.00")
        assert draft.total_amount == Decimal("15.50")

    def test_apply_line_items_recaptures_price_for_new_product(self, composer):
        draft = composer.init_draft(self._saved_order())
        draft = composer.apply_line_items(draft, [OrderItemInput(product_id=PRODUCT_B.id, quantity=2)])

        assert len(draft.line_items) == 1
        assert draft.line_items[0].unit_price_at_order_time == Decimal("3.50")
        assert draft.total_amount == Decimal("7.00")


class TestValidation:
    """Test validation rules and their order."""

    def test_valid_draft(self, composer):
        assert composer.validate(_draft_a2_b1(composer)).is_valid

    def test_missing_client_checked_first(self, composer):
        draft = composer.init_draft()

        assert composer.validate(draft).rule == ValidationRule.MISSING_CLIENT

    def test_no_line_items(self, composer):
        draft = composer.set_client(composer.init_draft(), CLIENT_C.id)

        assert composer.validate(draft).rule == ValidationRule.NO_LINE_ITEMS

    def test_line_without_product(self, composer):
        draft = composer.add_line_item(composer.set_client(composer.init_draft(), CLIENT_C.id))

        assert composer.validate(draft).rule == ValidationRule.INVALID_LINE_ITEM

    def test_zero_quantity(self, composer):
        draft = composer.set_line_item_quantity(_draft_a2_b1(composer), 0, 0)

        assert composer.validate(draft).rule == ValidationRule.INVALID_LINE_ITEM


@pytest.mark.asyncio
class TestSubmit:
    """Test the write sequence produced by submit()."""

    @pytest.mark.parametrize("mutate,rule", [
        (lambda c, d: c.set_client(d, None), ValidationRule.MISSING_CLIENT),
        (lambda c, d: c.remove_line_item(c.remove_line_item(d, 1), 0), ValidationRule.NO_LINE_ITEMS),
        (lambda c, d: c.set_line_item_quantity(d, 1, 0), ValidationRule.INVALID_LINE_ITEM),
    ])
    async def test_invalid_draft_makes_no_repository_calls(self, composer, mutate, rule):
        repository = RecordingRepository()
        draft = mutate(composer, _draft_a2_b1(composer))

        with pytest.raises(OrderValidationError) as exc_info:
            await composer.submit(draft, repository)

        assert exc_info.value.rule == rule
        assert repository.calls == []

    async def test_create_inserts_order_then_line_items(self, composer):
        repository = RecordingRepository(new_order_id=42)

        order_id = await composer.submit(_draft_a2_b1(composer), repository)

        assert order_id == 42
        assert [call[0] for call in repository.calls] == ["order_write", "insert_order", "insert_line_items"]
        _, client_id, created_at, total = repository.calls[1]
        assert (client_id, created_at, total) == (CLIENT_C.id, date(2024, 5, 10), Decimal("13.50"))
        _, target_id, items = repository.calls[2]
        assert target_id == 42
        assert [(i.product_id, i.quantity, i.unit_price_at_order_time) for i in items] == [
            (1, 2, Decimal("5.00")),
            (2, 1, Decimal("3.50")),
        ]

    async def test_edit_updates_then_replaces_line_items(self, composer):
        repository = RecordingRepository()
        draft = _draft_a2_b1(composer).model_copy(update={"order_id": 7})
        draft = composer.set_line_item_quantity(draft, 0, 3)

        order_id = await composer.submit(draft, repository)

        assert order_id == 7
        assert [call[0] for call in repository.calls] == [
            "order_write", "update_order", "delete_line_items", "insert_line_items",
        ]
        assert repository.calls[1][2]["total_amount"] == Decimal("18.50")
        assert repository.calls[2][1] == 7

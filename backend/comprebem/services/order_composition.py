# backend/comprebem/services/order_composition.py

"""
Servicio de composición de pedidos.

Mantiene el borrador de un pedido (nuevo o en edición) y garantiza el
invariante del total antes de guardarlo:

    total_amount == round2(Σ línea.quantity × línea.unit_price_at_order_time)

Reglas principales:
- El precio de cada línea se captura del catálogo en el momento de elegir el
  producto (`set_line_item_product`) y no se vuelve a leer al guardar. Un
  cambio posterior del precio del producto no altera el pedido.
- Toda mutación de líneas recalcula el total; no hay forma de saltarse
  `recompute_total` desde fuera.
- `submit` valida antes de tocar la base de datos. Un borrador inválido no
  produce ninguna llamada al repositorio.

Los borradores son modelos Pydantic y cada operación devuelve un borrador
nuevo, dejando intacto el recibido. El servicio no guarda estado salvo los
catálogos de clientes y productos seleccionables.
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Optional

from comprebem.core.exceptions import DraftError, OrderValidationError, ValidationRule
from comprebem.schemas.order_schema import DraftLineItem, OrderDraft, OrderItemInput, ValidationResult

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class OrderComposer:
    """
    Compone y guarda pedidos a partir de los catálogos seleccionables.

    `products` son los productos que se pueden elegir en una línea (los
    activos) y de ellos se toma el precio vigente. `clients`, si se indica,
    limita los clientes que se pueden asignar a un pedido.
    """

    def __init__(self, products: Iterable[Any], clients: Optional[Iterable[Any]] = None):
        self._products = {product.id: product for product in products}
        self._client_ids = None if clients is None else {client.id for client in clients}

    # ========================================
    # CREACIÓN DEL BORRADOR
    # ========================================

    def init_draft(self, existing_order: Any = None, today: Optional[date] = None) -> OrderDraft:
        """
        Crea un borrador. Para editar, copia cliente, fecha y líneas del
        pedido guardado con el precio que cada línea ya tenía, no el actual.
        """
        if existing_order is None:
            return OrderDraft(created_at=today or date.today())

        line_items = [
            DraftLineItem(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price_at_order_time=_to_decimal(item.unit_price_at_order_time),
            )
            for item in existing_order.items
        ]
        draft = OrderDraft(
            order_id=existing_order.id,
            client_id=existing_order.client_id,
            created_at=existing_order.created_at,
            line_items=line_items,
        )
        return self.recompute_total(draft)

    # ========================================
    # CAMPOS DEL PEDIDO
    # ========================================

    def set_client(self, draft: OrderDraft, client_id: Optional[int]) -> OrderDraft:
        """
        Asigna el cliente. Un cliente que no está entre los seleccionables
        deja el pedido sin cliente, salvo que sea el que el pedido ya tenía.
        """
        if (
            client_id is not None
            and self._client_ids is not None
            and client_id not in self._client_ids
            and client_id != draft.client_id
        ):
            logger.warning(f"⚠️ PEDIDO: Cliente {client_id} no seleccionable")
            client_id = None
        return draft.model_copy(update={"client_id": client_id})

    def set_date(self, draft: OrderDraft, created_at: date) -> OrderDraft:
        return draft.model_copy(update={"created_at": created_at})

    # ========================================
    # LÍNEAS DEL PEDIDO
    # ========================================

    def _check_index(self, draft: OrderDraft, index: int) -> None:
        if not 0 <= index < len(draft.line_items):
            raise DraftError(f"La línea {index} no existe en el pedido ({len(draft.line_items)} líneas)")

    def _with_line_items(self, draft: OrderDraft, line_items: List[DraftLineItem]) -> OrderDraft:
        return self.recompute_total(draft.model_copy(update={"line_items": line_items}))

    def add_line_item(self, draft: OrderDraft) -> OrderDraft:
        """Añade una línea vacía: sin producto, cantidad 1 y precio 0."""
        return self._with_line_items(draft, [*draft.line_items, DraftLineItem()])

    def set_line_item_product(self, draft: OrderDraft, index: int, product_id: Optional[int]) -> OrderDraft:
        """
        Asigna el producto de una línea y captura su precio vigente. Un
        producto fuera del catálogo deja la línea sin producto y a precio 0,
        de modo que la validación la rechaza.
        """
        self._check_index(draft, index)
        product = self._products.get(product_id)
        if product is None:
            if product_id is not None:
                logger.warning(f"⚠️ PEDIDO: Producto {product_id} no seleccionable")
            line = DraftLineItem(product_id=None, quantity=draft.line_items[index].quantity)
        else:
            line = draft.line_items[index].model_copy(update={
                "product_id": product.id,
                "unit_price_at_order_time": _to_decimal(product.unit_price),
            })
        line_items = list(draft.line_items)
        line_items[index] = line
        return self._with_line_items(draft, line_items)

    def set_line_item_quantity(self, draft: OrderDraft, index: int, quantity: int) -> OrderDraft:
        """Cambia la cantidad. Las cantidades no positivas se rechazan al validar."""
        self._check_index(draft, index)
        line_items = list(draft.line_items)
        line_items[index] = line_items[index].model_copy(update={"quantity": quantity})
        return self._with_line_items(draft, line_items)

    def remove_line_item(self, draft: OrderDraft, index: int) -> OrderDraft:
        self._check_index(draft, index)
        line_items = [line for i, line in enumerate(draft.line_items) if i != index]
        return self._with_line_items(draft, line_items)

    def apply_line_items(self, draft: OrderDraft, items: Iterable[OrderItemInput]) -> OrderDraft:
        """
        Aplica al borrador la lista de líneas de un formulario, fila a fila.

        Si la fila mantiene el producto solo cambia la cantidad y conserva el
        precio capturado; si cambia de producto se captura el precio vigente.
        Las filas sobrantes del borrador se eliminan.
        """
        items = list(items)
        for index, item in enumerate(items):
            if index >= len(draft.line_items):
                draft = self.add_line_item(draft)
            current = draft.line_items[index]
            if item.product_id is None or item.product_id != current.product_id:
                draft = self.set_line_item_product(draft, index, item.product_id)
            draft = self.set_line_item_quantity(draft, index, item.quantity)
        while len(draft.line_items) > len(items):
            draft = self.remove_line_item(draft, len(draft.line_items) - 1)
        return draft

    # ========================================
    # TOTAL Y VALIDACIÓN
    # ========================================

    def recompute_total(self, draft: OrderDraft) -> OrderDraft:
        """Total = Σ cantidad × precio capturado, redondeado a céntimos (mitad hacia arriba)."""
        total = sum(
            (Decimal(line.quantity) * line.unit_price_at_order_time for line in draft.line_items),
            Decimal("0"),
        )
        return draft.model_copy(update={"total_amount": total.quantize(CENT, rounding=ROUND_HALF_UP)})

    def validate(self, draft: OrderDraft) -> ValidationResult:
        """Devuelve la primera regla incumplida: cliente, líneas, líneas válidas."""
        if draft.client_id is None:
            return ValidationResult(rule=ValidationRule.MISSING_CLIENT)
        if not draft.line_items:
            return ValidationResult(rule=ValidationRule.NO_LINE_ITEMS)
        if any(line.product_id is None or line.quantity <= 0 for line in draft.line_items):
            return ValidationResult(rule=ValidationRule.INVALID_LINE_ITEM)
        return ValidationResult()

    # ========================================
    # GUARDADO
    # ========================================

    async def submit(self, draft: OrderDraft, repository: Any) -> int:
        """
        Valida y guarda el borrador. Devuelve el id del pedido.

        Nuevo pedido: inserta el pedido y después sus líneas con el id nuevo.
        Edición: actualiza cliente, fecha y total, borra las líneas guardadas
        e inserta las del borrador. Cada paso espera al anterior y todos van
        dentro de la misma escritura de pedido del repositorio.
        """
        result = self.validate(draft)
        if not result.is_valid:
            logger.warning(f"⚠️ PEDIDO: Borrador rechazado ({result.rule.value})")
            raise OrderValidationError(result.rule)

        draft = self.recompute_total(draft)

        if draft.is_new:
            async with repository.order_write("añadir pedido"):
                order = await repository.insert_order(draft.client_id, draft.created_at, draft.total_amount)
                order_id = order.id
                await repository.insert_line_items(order_id, draft.line_items)
            logger.info(f"🆕 PEDIDO: Creado pedido {order_id} por {draft.total_amount}")
            return order_id

        order_id = draft.order_id
        async with repository.order_write("actualizar pedido"):
            await repository.update_order(order_id, {
                "client_id": draft.client_id,
                "created_at": draft.created_at,
                "total_amount": draft.total_amount,
            })
            await repository.delete_line_items(order_id)
            await repository.insert_line_items(order_id, draft.line_items)
        logger.info(f"🔄 PEDIDO: Actualizado pedido {order_id} por {draft.total_amount}")
        return order_id

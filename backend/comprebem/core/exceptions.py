# backend/comprebem/core/exceptions.py
"""
Excepciones de dominio de la aplicación.

Taxonomía de errores:
- OrderValidationError: error local, bloquea el envío del pedido y nunca llega
  a la base de datos (MissingClient, NoLineItems, InvalidLineItem).
- DraftError: operación inválida sobre un borrador (índice de línea inexistente).
- RepositoryError: fallo de la base de datos en cualquier lectura o escritura,
  con el mensaje original del driver.
- PartialWriteError: fallo a mitad de una escritura de pedido no atómica
  (solo posible con ORDER_WRITES_ATOMIC=False).
- NotFoundError: el registro solicitado no existe.
- AuthenticationError: credenciales o sesión inválidas.
"""

import enum
from typing import List


class ValidationRule(str, enum.Enum):
    """Reglas de validación de un borrador de pedido, en orden de comprobación."""
    MISSING_CLIENT = "MissingClient"
    NO_LINE_ITEMS = "NoLineItems"
    INVALID_LINE_ITEM = "InvalidLineItem"


VALIDATION_MESSAGES = {
    ValidationRule.MISSING_CLIENT: "Selecciona un cliente para el pedido.",
    ValidationRule.NO_LINE_ITEMS: "Añade al menos un producto al pedido.",
    ValidationRule.INVALID_LINE_ITEM: "Revisa los productos y las cantidades del pedido.",
}


class ComprebemError(Exception):
    """Clase base para los errores de la aplicación."""


class OrderValidationError(ComprebemError):
    def __init__(self, rule: ValidationRule):
        self.rule = rule
        super().__init__(VALIDATION_MESSAGES[rule])


class DraftError(ComprebemError):
    pass


class NotFoundError(ComprebemError):
    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} no encontrado")


class RepositoryError(ComprebemError):
    """Fallo del servicio de datos; `operation` nombra la operación intentada."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Error al {operation}: {message}")


class PartialWriteError(RepositoryError):
    """
    Una escritura de pedido paso a paso falló después de confirmar algún paso.
    El pedido y sus líneas pueden quedar inconsistentes; no hay rollback.
    """

    def __init__(self, operation: str, completed_steps: List[str], message: str):
        self.completed_steps = list(completed_steps)
        super().__init__(operation, message)

    def __str__(self) -> str:
        steps = ", ".join(self.completed_steps)
        return f"Error al {self.operation}: {self.message} (pasos ya confirmados: {steps})"


class AuthenticationError(ComprebemError):
    pass

# backend/comprebem/crud/query_utils.py
"""
Utilidades compartidas por los módulos CRUD para construir consultas.
"""

from typing import Dict

from sqlalchemy.sql.elements import ColumnElement


def order_by_clause(sortable: Dict[str, ColumnElement], sort_by: str, descending: bool = False):
    """
    Devuelve la cláusula ORDER BY para un campo permitido.

    Solo se aceptan los campos de `sortable`; cualquier otro valor lanza
    ValueError para no exponer columnas arbitrarias desde la API.
    """
    column = sortable.get(sort_by)
    if column is None:
        allowed = ", ".join(sorted(sortable))
        raise ValueError(f"Campo de ordenación no válido: '{sort_by}'. Permitidos: {allowed}")
    return column.desc() if descending else column.asc()

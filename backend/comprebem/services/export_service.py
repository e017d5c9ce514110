# backend/comprebem/services/export_service.py
"""
Servicio de exportación de listados.

Genera dos formatos descargables a partir de filas ya preparadas:
- Tabla CSV para abrir en una hoja de cálculo (módulo csv).
- Documento PDF paginado con banda de cabecera y número de página al pie,
  generado con WeasyPrint a partir de HTML.

También contiene los constructores de filas de cada entidad, con las mismas
columnas que muestran las tablas de la consola.
"""

import csv
import html
import io
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Sequence

from comprebem.core.config import settings
from comprebem.services.filter_service import client_label, order_products_label
from comprebem.services.metrics import expiration_status, format_date

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
PDF_MEDIA_TYPE = "application/pdf"

FORMAT_DESCRIPTION = "csv: hoja de cálculo en formato CSV (UTF-8 con BOM); pdf: documento imprimible"

# ========================================
# FORMATOS
# ========================================

def export_tabular(rows: Iterable[Dict[str, Any]], entity_name: str, column_keys: Sequence[str]) -> bytes:
    """
    Genera la hoja de cálculo del listado en formato CSV (UTF-8 con BOM),
    con una columna por clave de `column_keys`, en ese orden. Las claves que
    falten en una fila quedan vacías.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(column_keys), extrasaction="ignore")
    writer.writeheader()
    count = 0
    for row in rows:
        writer.writerow({key: "" if row.get(key) is None else row.get(key) for key in column_keys})
        count += 1
    logger.info(f"📄 EXPORTACIÓN: {count} filas de '{entity_name}' a CSV")
    return buffer.getvalue().encode("utf-8-sig")


def _build_printable_html(header_row: Sequence[str], body_rows: Iterable[Sequence[Any]], entity_name: str) -> str:
    """Construye el HTML del documento imprimible."""
    head_html = "".join(f"<th>{html.escape(str(cell))}</th>" for cell in header_row)
    body_html = ""
    for row in body_rows:
        cells = "".join(f"<td>{html.escape('' if cell is None else str(cell))}</td>" for cell in row)
        body_html += f"<tr>{cells}</tr>\n"

    title = html.escape(f"{settings.STORE_NAME} - {entity_name}")

    return f"""
    <!DOCTYPE html>
    <html lang="pt-BR">
    <head>
        <meta charset="UTF-8">
        <title>{title}</title>
        <style>
            @page {{
                size: A4;
                margin: 20mm 10mm 18mm 10mm;
                @bottom-left {{ content: "Página " counter(page); font-size: 10pt; }}
            }}
            body {{ font-family: Helvetica, Arial, sans-serif; font-size: 8pt; color: #333; }}
            h1 {{ font-size: 12pt; }}
            table {{ width: 100%; border-collapse: collapse; }}
            thead {{ display: table-header-group; }}
            th {{ background: rgb(41, 128, 185); color: #fff; font-weight: bold; text-align: left; padding: 3pt; }}
            td {{ padding: 3pt; vertical-align: middle; text-align: left; border-bottom: 1px solid #eee; }}
        </style>
    </head>
    <body>
        <h1>{title}</h1>
        <table>
            <thead><tr>{head_html}</tr></thead>
            <tbody>
{body_html}            </tbody>
        </table>
    </body>
    </html>
    """


def export_printable(header_row: Sequence[str], body_rows: Iterable[Sequence[Any]], entity_name: str) -> bytes:
    """Genera el PDF del listado."""
    # WeasyPrint carga librerías nativas (Pango); solo se importa al exportar
    from weasyprint import HTML

    html_content = _build_printable_html(header_row, body_rows, entity_name)
    pdf_bytes = HTML(string=html_content).write_pdf()
    logger.info(f"📄 EXPORTACIÓN: '{entity_name}' a PDF ({len(pdf_bytes)} bytes)")
    return pdf_bytes

# ========================================
# FILAS POR ENTIDAD
# ========================================

CLIENT_COLUMNS = ["id", "name", "tax_id", "email", "phone"]
CLIENT_HEADERS = ["ID", "Nome", "CPF/CNPJ", "Email", "Telefone"]

PRODUCT_COLUMNS = ["id", "name", "unit_price", "stock_quantity", "expiration_date"]
PRODUCT_HEADERS = ["ID", "Nome", "Preço", "Estoque", "Validade"]

ORDER_COLUMNS = ["ID", "Cliente", "Data", "Produtos", "Total"]


def client_rows(clients: Iterable[Any]) -> List[Dict[str, Any]]:
    return [{key: getattr(client, key) for key in CLIENT_COLUMNS} for client in clients]


def client_printable_rows(clients: Iterable[Any]) -> List[List[Any]]:
    return [[getattr(client, key) for key in CLIENT_COLUMNS] for client in clients]


def product_rows(products: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {
            "id": product.id,
            "name": product.name,
            "unit_price": product.unit_price,
            "stock_quantity": product.stock_quantity,
            "expiration_date": product.expiration_date.isoformat() if product.expiration_date else None,
        }
        for product in products
    ]


def product_printable_rows(products: Iterable[Any], today: date) -> List[List[Any]]:
    return [
        [
            product.id,
            product.name,
            product.unit_price,
            product.stock_quantity,
            expiration_status(product.expiration_date, today, settings.EXPIRING_SOON_DAYS).text,
        ]
        for product in products
    ]


def order_rows(orders: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {
            "ID": order.id,
            "Cliente": client_label(order),
            "Data": format_date(order.created_at),
            "Produtos": order_products_label(order, separator="; "),
            "Total": f"{order.total_amount:.2f}",
        }
        for order in orders
    ]


def order_printable_rows(orders: Iterable[Any]) -> List[List[Any]]:
    return [
        [
            row["ID"],
            row["Cliente"],
            row["Data"],
            row["Produtos"],
            f"R$ {row['Total']}",
        ]
        for row in order_rows(orders)
    ]


def spreadsheet_filename(entity_name: str) -> str:
    """Nombre del fichero de hoja de cálculo, p. ej. `clientes_planilha.csv`."""
    return f"{entity_name}_planilha.csv"


def attachment_headers(filename: str) -> Dict[str, str]:
    """Cabeceras HTTP para descargar el contenido como fichero."""
    return {"Content-Disposition": f'attachment; filename="{filename}"'}

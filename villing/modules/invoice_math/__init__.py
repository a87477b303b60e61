"""
Módulo de Cálculos de Facturación - Villing

Motor de cálculo monetario usado por todos los documentos tipo factura:
facturas electrónicas y POS, remisiones, cotizaciones, notas crédito/débito,
compras y ajustes de inventario.

Componentes:
- schemas.py: Configuración de cálculo, líneas y tipos de documento
- calculator.py: Totales por línea, por documento y desglose de impuestos
- documents.py: Políticas por tipo de documento (retención, devoluciones)
- router.py: Endpoints REST API
- tests.py: Pruebas unitarias y de API
"""

from .schemas import CalculationConfig, DiscountMode, DocumentType, LineItem
from .calculator import (
    AggregateTotals, LineTotals, TaxBreakdown,
    calculate_aggregate, calculate_line_total, calculate_tax_breakdown,
    add_percentage, remove_percentage
)
from .documents import calculate_document_totals

__all__ = [
    "CalculationConfig",
    "DiscountMode",
    "DocumentType",
    "LineItem",
    "AggregateTotals",
    "LineTotals",
    "TaxBreakdown",
    "calculate_aggregate",
    "calculate_line_total",
    "calculate_tax_breakdown",
    "calculate_document_totals",
    "add_percentage",
    "remove_percentage"
]

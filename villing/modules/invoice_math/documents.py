"""
Políticas de cálculo por tipo de documento
"""

import logging
from typing import Iterable, List, Optional

from villing.common.numbers import ZERO, money_context, to_decimal
from villing.modules.invoice_math.calculator import AggregateTotals, calculate_aggregate
from villing.modules.invoice_math.schemas import CalculationConfig, DocumentType

logger = logging.getLogger(__name__)

# Documentos de compra: los únicos donde aplica la retención en la fuente
PURCHASE_DOCUMENTS = frozenset({
    DocumentType.PURCHASE,
    DocumentType.PURCHASE_REMISION,
    DocumentType.PURCHASE_INVOICE,
})

# Documentos que pueden llevar cantidades negativas (devoluciones)
REFUND_DOCUMENTS = frozenset({DocumentType.CREDIT_NOTE})


def supports_retention(document_type: DocumentType) -> bool:
    return document_type in PURCHASE_DOCUMENTS


def allows_negative_quantities(document_type: DocumentType) -> bool:
    return document_type in REFUND_DOCUMENTS


def config_for_document(document_type: DocumentType, config: CalculationConfig) -> CalculationConfig:
    """Ajustar la configuración a las reglas del tipo de documento"""
    if not supports_retention(document_type) and config.retention:
        logger.debug(f"Ignoring retention {config.retention}% for document type {document_type.value}")
        return config.model_copy(update={"retention": ZERO})
    return config


def calculate_document_totals(
    document_type: DocumentType,
    items: Iterable,
    config: Optional[CalculationConfig] = None
) -> AggregateTotals:
    config = config_for_document(document_type, config or CalculationConfig())
    return calculate_aggregate(items, config)


def validate_document_items(document_type: DocumentType, items: List) -> List[str]:
    """
    Validar las líneas de un documento antes de calcularlo

    Returns:
        Lista de mensajes de error (vacía si el documento es válido)
    """
    if not items:
        return ["No puedes crear una factura sin productos"]

    if allows_negative_quantities(document_type):
        return []

    errors = []
    with money_context():
        for index, item in enumerate(items, start=1):
            name = getattr(item, 'name', None) or f"#{index}"
            quantity = to_decimal(item.quantity)

            if quantity == ZERO:
                errors.append(f"El producto {name} no puede tener cantidad 0")
            elif quantity < ZERO:
                errors.append(f"El producto {name} no puede tener cantidad negativa")

    return errors

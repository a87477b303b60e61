from fastapi import APIRouter, HTTPException, status

from villing.modules.invoice_math.calculator import (
    calculate_aggregate, calculate_line_total, calculate_tax_breakdown
)
from villing.modules.invoice_math.documents import (
    config_for_document, validate_document_items
)
from villing.modules.invoice_math.schemas import (
    AggregateTotalsOut, LineTotalsOut, LineTotalsRequest, TaxBreakdownOut, TotalsRequest
)

invoice_math_router = APIRouter(prefix="/invoice-math", tags=["Invoice Math"])


@invoice_math_router.post("/line-totals", response_model=LineTotalsOut)
def get_line_totals(request: LineTotalsRequest):
    """
    Calcular subtotal, descuento, impuesto y total de una línea
    """
    return LineTotalsOut.model_validate(calculate_line_total(request.item, request.config))


@invoice_math_router.post("/totals", response_model=AggregateTotalsOut)
def get_document_totals(request: TotalsRequest):
    """
    Calcular los totales de un documento

    Si se indica document_type se validan las cantidades y se aplica la
    política del documento (la retención solo aplica en compras).
    Incluye el desglose de impuestos por tarifa.
    """
    config = request.config

    if request.document_type is not None:
        errors = validate_document_items(request.document_type, request.items)
        if errors:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=errors
            )
        config = config_for_document(request.document_type, config)

    totals = calculate_aggregate(request.items, config)
    breakdown = calculate_tax_breakdown(request.items, config)
    return AggregateTotalsOut(
        subtotal=totals.subtotal,
        total_discount=totals.total_discount,
        total_tax=totals.total_tax,
        total_retention=totals.total_retention,
        total=totals.total,
        total_refunds=totals.total_refunds,
        tax_breakdown=[TaxBreakdownOut.model_validate(b) for b in breakdown]
    )

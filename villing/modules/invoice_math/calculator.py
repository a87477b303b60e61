"""
Motor de cálculo de totales para documentos de venta y compra

Calcula subtotal, descuento, impuesto, retención y total por línea y por
documento. Es el mismo cálculo para facturas, facturas POS, remisiones,
notas crédito/débito, compras y ajustes de inventario.

Reglas:
- Toda la aritmética se hace con Decimal; cada valor derivado se redondea una
  sola vez a pesos enteros con ROUND_HALF_UP
- Con impuesto incluido, el impuesto es el valor embebido en la base gravable
  (tarifa 0 = impuesto 0) y el subtotal se reporta sin impuesto; la
  diferencia de redondeo queda en el descuento
- La retención se aplica una sola vez sobre el subtotal del documento
- NaN/Infinity no se corrigen: se propagan como Decimal('NaN')
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from villing.common.numbers import (
    HUNDRED, ZERO, money_context, round_currency, to_decimal
)
from villing.modules.invoice_math.schemas import CalculationConfig, DiscountMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineTotals:
    line_subtotal: Decimal
    line_discount: Decimal
    line_tax: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class AggregateTotals:
    subtotal: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_tax: Decimal = ZERO
    total_retention: Decimal = ZERO
    total: Decimal = ZERO
    total_refunds: Decimal = ZERO


@dataclass(frozen=True)
class TaxBreakdown:
    rate: Decimal
    taxable_base: Decimal
    tax_amount: Decimal


def _field(item, name: str):
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _optional_decimal(value) -> Decimal:
    return ZERO if value is None else to_decimal(value)


def _discount_amount(raw: Decimal, discount: Decimal, mode: DiscountMode) -> Decimal:
    if mode == DiscountMode.AMOUNT:
        # El descuento nunca supera el valor de la línea y conserva su signo
        if raw < ZERO:
            return -min(max(discount, ZERO), -raw)
        return min(max(discount, ZERO), raw)
    return raw * discount / HUNDRED


def calculate_line_total(item, config: Optional[CalculationConfig] = None) -> LineTotals:
    """
    Calcular los totales de una línea

    Args:
        item: Línea con quantity, price, discount y tax (dict, schema u objeto ORM)
        config: Configuración de cálculo (impuesto incluido, modo de descuento)

    Returns:
        LineTotals en pesos enteros, con
        line_total == line_subtotal - line_discount + line_tax
    """
    config = config or CalculationConfig()

    with money_context():
        quantity = to_decimal(_field(item, 'quantity'))
        price = to_decimal(_field(item, 'price'))
        discount = _optional_decimal(_field(item, 'discount'))
        tax = _optional_decimal(_field(item, 'tax'))

        raw_amount = quantity * price
        discount_amount = _discount_amount(raw_amount, discount, config.discount_mode)
        taxable_base = raw_amount - discount_amount

        if config.tax_included:
            divisor = 1 + tax / HUNDRED
            line_total = round_currency(taxable_base)
            line_tax = round_currency(taxable_base - taxable_base / divisor)
            net_amount = line_total - line_tax

            # El residuo del redondeo va al descuento, nunca al impuesto
            line_subtotal = round_currency(raw_amount / divisor)
            line_discount = line_subtotal - net_amount
            if (line_discount < ZERO <= raw_amount) or (line_discount > ZERO >= raw_amount):
                line_subtotal, line_discount = net_amount, ZERO
        else:
            line_subtotal = round_currency(raw_amount)
            line_discount = round_currency(discount_amount)
            line_tax = round_currency(taxable_base * tax / HUNDRED)
            line_total = line_subtotal - line_discount + line_tax

    return LineTotals(
        line_subtotal=line_subtotal,
        line_discount=line_discount,
        line_tax=line_tax,
        line_total=line_total
    )


def calculate_aggregate(
    items: Iterable,
    config: Optional[CalculationConfig] = None
) -> AggregateTotals:
    """
    Calcular los totales de un documento

    Suma los totales de cada línea y aplica la retención una sola vez sobre el
    subtotal agregado. Las líneas con cantidad negativa (devoluciones) se
    acumulan además en total_refunds.
    """
    config = config or CalculationConfig()

    subtotal = ZERO
    total_discount = ZERO
    total_tax = ZERO
    total_refunds = ZERO

    with money_context():
        for item in items:
            line = calculate_line_total(item, config)
            subtotal += line.line_subtotal
            total_discount += line.line_discount
            total_tax += line.line_tax

            if to_decimal(_field(item, 'quantity')) < ZERO:
                total_refunds += line.line_total

        total_retention = round_currency(subtotal * config.retention / HUNDRED)
        total = subtotal - total_discount + total_tax - total_retention

    logger.debug(
        f"Aggregate totals: subtotal={subtotal} discount={total_discount} "
        f"tax={total_tax} retention={total_retention} total={total}"
    )

    return AggregateTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        total_tax=total_tax,
        total_retention=total_retention,
        total=total,
        total_refunds=total_refunds
    )


def calculate_tax_breakdown(
    items: Iterable,
    config: Optional[CalculationConfig] = None
) -> List[TaxBreakdown]:
    """
    Agrupar impuestos por tarifa

    La base gravable de cada línea es su subtotal menos su descuento. La suma
    de tax_amount coincide con total_tax de calculate_aggregate.
    """
    config = config or CalculationConfig()
    grouped = {}

    with money_context():
        for item in items:
            line = calculate_line_total(item, config)
            rate = _optional_decimal(_field(item, 'tax'))

            if rate not in grouped:
                grouped[rate] = {"taxable_base": ZERO, "tax_amount": ZERO}

            grouped[rate]["taxable_base"] += line.line_subtotal - line.line_discount
            grouped[rate]["tax_amount"] += line.line_tax

        rates = sorted(grouped)

    return [
        TaxBreakdown(rate=rate, **grouped[rate])
        for rate in rates
    ]


def remove_percentage(value, percentage) -> Decimal:
    """Valor sin el porcentaje embebido: 119 con 19% -> 100 (sin redondear)"""
    with money_context():
        return to_decimal(value) / (1 + to_decimal(percentage) / HUNDRED)


def add_percentage(value, percentage) -> Decimal:
    """Valor más el porcentaje: 100 con 19% -> 119 (sin redondear)"""
    with money_context():
        number = to_decimal(value)
        return number + number * to_decimal(percentage) / HUNDRED

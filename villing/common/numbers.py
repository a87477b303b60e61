"""
Primitivas numéricas y de moneda compartidas

Utilidades usadas por el motor de cálculo de facturas, el mapeo de nómina
electrónica y el código de presentación:
- Conversión segura a Decimal (comas de miles, cadenas, floats)
- Redondeo comercial a pesos enteros (ROUND_HALF_UP)
- Separación de parte entera y centavos para visualización
- Formato de moneda con separador de miles
- Normalización de textos para comparar etiquetas
"""

import unicodedata
from decimal import Context, Decimal, ROUND_DOWN, ROUND_HALF_UP, localcontext
from typing import NamedTuple, Optional, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal('0')
HUNDRED = Decimal('100')
PESO = Decimal('1')
CENTS = Decimal('0.01')

# Sin traps: NaN e Infinity se propagan en lugar de lanzar InvalidOperation
MONEY_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP, traps=[])


def money_context():
    """Contexto local para aritmética monetaria"""
    return localcontext(MONEY_CONTEXT)


class FloatParts(NamedTuple):
    integer: Decimal
    decimal: str


def to_decimal(value) -> Decimal:
    """
    Convertir un valor numérico a Decimal sin perder precisión

    Los floats se convierten a través de su representación en texto y las
    cadenas pueden traer comas de miles ("1,250,000"). Valores no numéricos
    (incluido None) producen Decimal('NaN').
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        return Decimal('NaN')
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return MONEY_CONTEXT.create_decimal(repr(value))
    cleaned = str(value).replace(',', '').strip()
    return MONEY_CONTEXT.create_decimal(cleaned or 'NaN')


def to_number(value) -> Optional[Decimal]:
    """
    Conversión tolerante usada en conceptos de nómina

    None se conserva (el concepto no trae el dato); cualquier valor que no
    sea un número finito se convierte en 0.
    """
    if value is None:
        return None
    number = to_decimal(value)
    if not number.is_finite():
        return ZERO
    return number


def round_currency(value: Decimal) -> Decimal:
    """Redondear a pesos enteros con redondeo comercial (ROUND_HALF_UP)"""
    rounded = value.quantize(PESO, context=MONEY_CONTEXT)
    if rounded.is_zero():
        return ZERO
    return rounded


def split_into_integer_and_fraction(value: Number) -> FloatParts:
    """
    Separar un valor en su parte entera y sus centavos

    Se usa solo para visualización ("$1,234" + ".56"): los centavos se
    truncan hacia cero, no se redondean.

    Returns:
        FloatParts con la parte entera y los centavos como texto de dos dígitos
    """
    number = to_decimal(value)
    if not number.is_finite():
        return FloatParts(integer=Decimal('NaN'), decimal='NaN')

    truncated = number.quantize(CENTS, rounding=ROUND_DOWN, context=MONEY_CONTEXT)
    integer = truncated.to_integral_value(rounding=ROUND_DOWN)
    cents = int(abs(truncated - integer) * HUNDRED)
    return FloatParts(integer=integer + 0, decimal=f"{cents:02d}")


def format_currency(value: Number) -> str:
    """Formatear en pesos enteros con separador de miles: 107100 -> '107,100'"""
    number = round_currency(to_decimal(value))
    if not number.is_finite():
        return 'NaN'
    if number.is_zero():
        return '0'
    return f"{number:,f}"


def decimal_to_json_number(value: Decimal) -> Union[int, float]:
    """Representación JSON numérica de un Decimal (entero si no tiene decimales)"""
    if value.is_finite() and value == value.to_integral_value():
        return int(value)
    return float(value)


def normalize_text(value: Optional[str]) -> str:
    """Normalizar texto para comparar etiquetas: sin tildes, minúsculas y sin espacios extra"""
    decomposed = unicodedata.normalize('NFKD', value or '')
    without_accents = ''.join(c for c in decomposed if not unicodedata.combining(c))
    return ' '.join(without_accents.casefold().split())


def compare_strings(a: Optional[str], b: Optional[str]) -> bool:
    return normalize_text(a) == normalize_text(b)

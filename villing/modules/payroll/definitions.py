"""
Definiciones de conceptos de nómina y calculadoras

Cada concepto del catálogo tiene una forma de cálculo (sub_type):
- value: valor digitado por el usuario
- value_from_days_worked: valor mensual proporcional a los días trabajados
- quantity: horas o días sobre el valor hora (salario base / 240)
- percent_of_salary: porcentaje del salario del periodo
- lay_off / lay_off_interests: cesantías y sus intereses sobre 360 días

También arma los conceptos por defecto de un empleado (salario, prima,
cesantías, salud, pensión...) y los reajusta cuando cambia el salario.
"""

from enum import Enum
from decimal import Decimal
from typing import Iterable, List, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from villing.common.numbers import HUNDRED, ZERO, money_context, round_currency, to_decimal
from villing.core.config import settings
from villing.modules.payroll.concepts import (
    ConceptType, DeductionConcept, IncomeConcept, resolve_concept_type
)
from villing.modules.payroll.lookups import coerce_concepts
from villing.modules.payroll.schemas import PayrollConcept

HOURS_PER_MONTH = Decimal('240')
DAYS_PER_YEAR = Decimal('360')
LAYOFFS_INTEREST_RATE = Decimal('0.12')


class ConceptSubType(str, Enum):
    VALUE = "value"
    VALUE_FROM_DAYS_WORKED = "value_from_days_worked"
    QUANTITY = "quantity"
    PERCENT_OF_SALARY = "percent_of_salary"
    LAY_OFF = "lay_off"
    LAY_OFF_INTERESTS = "lay_off_interests"


class PeriodFrequency(str, Enum):
    WEEKLY = "Semanal"
    TEN_DAYS = "Decadal"
    BIWEEKLY = "Quincenal"
    MONTHLY = "Mensual"


class ConceptDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    key_name: Union[IncomeConcept, DeductionConcept]
    type: ConceptType
    sub_type: ConceptSubType
    percentage: Decimal = ZERO
    required: bool = False
    read_only: bool = False
    label: Optional[str] = None
    multiplier: Optional[int] = None
    value_on_30_days: Optional[Decimal] = None


def _income(key, sub_type=ConceptSubType.VALUE, **kwargs) -> ConceptDefinition:
    return ConceptDefinition(key_name=key, type=ConceptType.INCOME, sub_type=sub_type, **kwargs)


def _deduction(key, sub_type=ConceptSubType.VALUE, **kwargs) -> ConceptDefinition:
    return ConceptDefinition(key_name=key, type=ConceptType.DEDUCTION, sub_type=sub_type, **kwargs)


def _hours(key, percentage: int) -> ConceptDefinition:
    return _income(
        key, ConceptSubType.QUANTITY,
        percentage=Decimal(percentage), label="Horas trabajadas", read_only=True
    )


def _days(key, percentage: int, label: str, multiplier: Optional[int] = None) -> ConceptDefinition:
    return _income(
        key, ConceptSubType.QUANTITY,
        percentage=Decimal(percentage), label=label, read_only=True, multiplier=multiplier
    )


_SPECIAL_INCOMES = {
    IncomeConcept.SALARY: _income(IncomeConcept.SALARY, required=True),
    IncomeConcept.TRANSPORT_AID: _income(
        IncomeConcept.TRANSPORT_AID, ConceptSubType.VALUE_FROM_DAYS_WORKED,
        value_on_30_days=settings.PAYROLL_TRANSPORT_AID_MONTHLY, read_only=True
    ),
    IncomeConcept.DAILY_OVERTIME: _hours(IncomeConcept.DAILY_OVERTIME, 25),
    IncomeConcept.NIGHT_OVERTIME: _hours(IncomeConcept.NIGHT_OVERTIME, 75),
    IncomeConcept.HOLIDAY_DAILY_OVERTIME: _hours(IncomeConcept.HOLIDAY_DAILY_OVERTIME, 100),
    IncomeConcept.HOLIDAY_NIGHT_OVERTIME: _hours(IncomeConcept.HOLIDAY_NIGHT_OVERTIME, 150),
    IncomeConcept.NIGHT_SURCHARGE: _hours(IncomeConcept.NIGHT_SURCHARGE, 35),
    IncomeConcept.HOLIDAY_DAILY_SURCHARGE: _hours(IncomeConcept.HOLIDAY_DAILY_SURCHARGE, 75),
    IncomeConcept.HOLIDAY_NIGHT_SURCHARGE: _hours(IncomeConcept.HOLIDAY_NIGHT_SURCHARGE, 110),
    # 8 horas por día de vacaciones
    IncomeConcept.VACATION: _days(IncomeConcept.VACATION, 0, "Días de vacaciones", multiplier=8),
    IncomeConcept.COMPENSATED_VACATION: _days(
        IncomeConcept.COMPENSATED_VACATION, 0, "Días de vacaciones", multiplier=8
    ),
    IncomeConcept.PRIMA: _income(
        IncomeConcept.PRIMA, ConceptSubType.PERCENT_OF_SALARY,
        percentage=Decimal('8.3333333'), required=True, read_only=True
    ),
    IncomeConcept.LAYOFFS: _income(
        IncomeConcept.LAYOFFS, ConceptSubType.LAY_OFF, required=True, read_only=True
    ),
    IncomeConcept.LAYOFFS_INTEREST: _income(
        IncomeConcept.LAYOFFS_INTEREST, ConceptSubType.LAY_OFF_INTERESTS, required=True, read_only=True
    ),
    IncomeConcept.INCAPACITY: _days(IncomeConcept.INCAPACITY, 100, "Días de incapacidad"),
    IncomeConcept.MATERNITY_LEAVE: _days(IncomeConcept.MATERNITY_LEAVE, 100, "Días de licencia"),
    IncomeConcept.PAID_LEAVE: _days(IncomeConcept.PAID_LEAVE, 100, "Días de licencia"),
    IncomeConcept.UNPAID_LEAVE: _days(IncomeConcept.UNPAID_LEAVE, 0, "Días de licencia"),
}

_SPECIAL_DEDUCTIONS = {
    DeductionConcept.HEALTH: _deduction(
        DeductionConcept.HEALTH, ConceptSubType.PERCENT_OF_SALARY,
        percentage=Decimal('4'), required=True, read_only=True
    ),
    DeductionConcept.PENSION: _deduction(
        DeductionConcept.PENSION, ConceptSubType.PERCENT_OF_SALARY,
        percentage=Decimal('4'), required=True, read_only=True
    ),
    DeductionConcept.PENSION_SECURITY_FUND: _deduction(
        DeductionConcept.PENSION_SECURITY_FUND, ConceptSubType.PERCENT_OF_SALARY,
        percentage=Decimal('1'), read_only=True
    ),
    DeductionConcept.TRADE_UNION: _deduction(
        DeductionConcept.TRADE_UNION, ConceptSubType.PERCENT_OF_SALARY
    ),
}

# Orden del catálogo: ingresos y luego deducciones
DEFINITIONS: List[ConceptDefinition] = (
    [_SPECIAL_INCOMES.get(key) or _income(key) for key in IncomeConcept]
    + [_SPECIAL_DEDUCTIONS.get(key) or _deduction(key) for key in DeductionConcept]
)

INCOME_DEFINITIONS = [d for d in DEFINITIONS if d.type == ConceptType.INCOME]
DEDUCTION_DEFINITIONS = [d for d in DEFINITIONS if d.type == ConceptType.DEDUCTION]
MANDATORY_DEFINITIONS = [d for d in DEFINITIONS if d.required]


def get_definition(key_name: str, concept_type: Optional[ConceptType] = None) -> Optional[ConceptDefinition]:
    """Definición de un concepto por etiqueta (y tipo, para etiquetas compartidas)"""
    concept_type = resolve_concept_type(key_name, concept_type)

    if concept_type == ConceptType.INCOME:
        key = IncomeConcept.resolve(key_name)
        return _SPECIAL_INCOMES.get(key) or (_income(key) if key else None)
    if concept_type == ConceptType.DEDUCTION:
        key = DeductionConcept.resolve(key_name)
        return _SPECIAL_DEDUCTIONS.get(key) or (_deduction(key) if key else None)
    return None


# ===== CALCULADORAS =====

def quantity_value(
    base_salary, percentage, quantity, multiplier: Optional[int] = None
) -> Decimal:
    """Horas o días sobre el valor hora, con el recargo del concepto"""
    with money_context():
        hourly_wage = to_decimal(base_salary) / HOURS_PER_MONTH
        hourly_wage = hourly_wage * (1 + to_decimal(percentage) / HUNDRED)
        return hourly_wage * to_decimal(quantity) * (multiplier or 1)


def percent_of_salary_value(salary, percentage) -> Decimal:
    with money_context():
        return to_decimal(salary) * to_decimal(percentage) / HUNDRED


def lay_off_value(base_salary, quantity) -> Decimal:
    with money_context():
        return to_decimal(base_salary) * to_decimal(quantity) / DAYS_PER_YEAR


def lay_off_interests_value(base_salary, quantity) -> Decimal:
    """Intereses a las cesantías: 12% anual proporcional a los días"""
    with money_context():
        quantity = to_decimal(quantity)
        product = lay_off_value(base_salary, quantity) * LAYOFFS_INTEREST_RATE * quantity
        if product.is_zero():
            return ZERO
        return product / DAYS_PER_YEAR


def calculate_concept_value(definition: ConceptDefinition, base_salary, salary, quantity) -> Decimal:
    """Valor de un concepto según su forma de cálculo (sin redondear)"""
    if definition.sub_type == ConceptSubType.QUANTITY:
        return quantity_value(base_salary, definition.percentage, quantity, definition.multiplier)
    if definition.sub_type == ConceptSubType.PERCENT_OF_SALARY:
        return percent_of_salary_value(salary, definition.percentage)
    if definition.sub_type == ConceptSubType.LAY_OFF:
        return lay_off_value(base_salary, quantity)
    if definition.sub_type == ConceptSubType.LAY_OFF_INTERESTS:
        return lay_off_interests_value(base_salary, quantity)
    if definition.sub_type == ConceptSubType.VALUE_FROM_DAYS_WORKED:
        return portion_from_full_value_by_days_worked(definition.value_on_30_days or ZERO, quantity)
    raise ValueError(f"El concepto {definition.key_name.value} no tiene fórmula de cálculo")


# ===== PERIODICIDAD =====

_DAYS_BY_FREQUENCY = {
    PeriodFrequency.WEEKLY: 7,
    PeriodFrequency.TEN_DAYS: 10,
    PeriodFrequency.BIWEEKLY: 15,
    PeriodFrequency.MONTHLY: 30,
}

_PERIODS_BY_FREQUENCY = {
    PeriodFrequency.WEEKLY: 4,
    PeriodFrequency.TEN_DAYS: 3,
    PeriodFrequency.BIWEEKLY: 2,
    PeriodFrequency.MONTHLY: 1,
}

_PERIODS_BY_DAYS = {days: _PERIODS_BY_FREQUENCY[f] for f, days in _DAYS_BY_FREQUENCY.items()}


def worked_days_by_frequency(frequency: PeriodFrequency) -> int:
    return _DAYS_BY_FREQUENCY.get(frequency, 0)


def frequency_by_range(days: int) -> PeriodFrequency:
    """Periodicidad de un rango de fechas de liquidación"""
    if days == 7:
        return PeriodFrequency.WEEKLY
    if days == 10:
        return PeriodFrequency.TEN_DAYS
    if days <= 16:
        return PeriodFrequency.BIWEEKLY
    return PeriodFrequency.MONTHLY


def base_salary_from_portion_by_frequency(frequency: PeriodFrequency, salary) -> Decimal:
    """Salario mensual a partir del salario del periodo"""
    return to_decimal(salary) * _PERIODS_BY_FREQUENCY.get(frequency, 0)


def novelty_value_by_frequency(frequency: PeriodFrequency, value) -> Decimal:
    """Parte de una novedad mensual que corresponde al periodo"""
    periods = _PERIODS_BY_FREQUENCY.get(frequency)
    if not periods:
        return ZERO
    with money_context():
        return to_decimal(value) / periods


def base_salary_from_portion_by_days_worked(salary, days_worked) -> Decimal:
    return to_decimal(salary) * _PERIODS_BY_DAYS.get(int(days_worked), 0)


def portion_from_full_value_by_days_worked(value, days_worked) -> Decimal:
    """Valor mensual proporcional a los días: 7, 10, 15 o 30; otro número da 0"""
    periods = _PERIODS_BY_DAYS.get(int(to_decimal(days_worked)))
    if not periods:
        return ZERO
    with money_context():
        return to_decimal(value) / periods


# ===== CONCEPTOS POR DEFECTO =====

def has_transport_aid_right(base_salary) -> bool:
    """Auxilio de transporte: salario base de hasta 2 salarios mínimos"""
    return to_decimal(base_salary) <= settings.PAYROLL_MINIMUM_SALARY * 2


def _new_concept(definition: ConceptDefinition, amount=ZERO, quantity=ZERO) -> PayrollConcept:
    return PayrollConcept(
        id=uuid4(),
        key_name=definition.key_name.value,
        amount=amount,
        quantity=quantity,
        type=definition.type
    )


def get_default_incomes(salary, days_worked: int, base_salary, has_transport_aid: bool) -> List[PayrollConcept]:
    """
    Ingresos obligatorios de un empleado nuevo en el periodo

    Incluye el auxilio de transporte proporcional a los días cuando el
    empleado tiene derecho a él.
    """
    concepts = [
        _new_concept(d, amount=to_decimal(salary) if d.key_name == IncomeConcept.SALARY else ZERO)
        for d in INCOME_DEFINITIONS if d.required
    ]

    if has_transport_aid:
        transport_aid = _SPECIAL_INCOMES[IncomeConcept.TRANSPORT_AID]
        amount = portion_from_full_value_by_days_worked(transport_aid.value_on_30_days, days_worked)
        concepts.append(_new_concept(
            transport_aid,
            amount=round_currency(amount),
            quantity=Decimal(days_worked)
        ))

    return adjust_concepts_to_base_salary(concepts, salary, days_worked, base_salary)


def get_default_deductions(salary) -> List[PayrollConcept]:
    """Deducciones obligatorias (salud y pensión) sobre el salario del periodo"""
    return [
        _new_concept(d, amount=round_currency(percent_of_salary_value(salary, d.percentage)))
        for d in DEDUCTION_DEFINITIONS if d.required
    ]


def adjust_concepts_to_base_salary(
    concepts: Iterable, salary, days_worked: int, base_salary
) -> List[PayrollConcept]:
    """
    Recalcular los conceptos que dependen del salario

    Los porcentajes del salario, el salario mismo, las cesantías y sus
    intereses se recalculan; el resto de conceptos queda igual.
    """
    adjusted = []

    for concept in coerce_concepts(concepts):
        definition = get_definition(concept.key_name, concept.type)
        if definition is None:
            adjusted.append(concept)
            continue

        amount, quantity = concept.amount, concept.quantity

        if definition.sub_type == ConceptSubType.PERCENT_OF_SALARY:
            amount = percent_of_salary_value(salary, definition.percentage)

        if definition.key_name == IncomeConcept.SALARY:
            amount = to_decimal(salary)
        elif definition.key_name == IncomeConcept.LAYOFFS:
            quantity = Decimal(days_worked)
            amount = lay_off_value(base_salary, quantity)
        elif definition.key_name == IncomeConcept.LAYOFFS_INTEREST:
            amount = lay_off_interests_value(base_salary, days_worked)

        adjusted.append(concept.model_copy(update={
            "amount": round_currency(amount) if amount is not None else None,
            "quantity": quantity
        }))

    return adjusted

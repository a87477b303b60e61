"""
Catálogo cerrado de conceptos de nómina

Los conceptos llegan como etiquetas en español escritas por el usuario. La
etiqueta se resuelve una sola vez contra este catálogo (sin distinguir
mayúsculas, tildes ni espacios) y el resto del módulo trabaja con los enums.
Ingresos y deducciones son catálogos separados: algunas etiquetas
("Reintegro", "Pago a terceros") existen en ambos.
"""

from enum import Enum
from typing import Optional

from villing.common.numbers import normalize_text


class ConceptType(str, Enum):
    INCOME = "income"
    DEDUCTION = "deduction"


class IncomeConcept(str, Enum):
    SALARY = "Salario"
    TRANSPORT_AID = "Auxilio de transporte"
    SALARY_VIATIC = "Viaticos salariales"
    NON_SALARY_VIATIC = "Viaticos no salariales"
    DAILY_OVERTIME = "Horas diurnas extras (25%)"
    NIGHT_OVERTIME = "Horas nocturnas extras (75%)"
    HOLIDAY_DAILY_OVERTIME = "Horas extras dominicales y festivas (100%)"
    HOLIDAY_NIGHT_OVERTIME = "Horas extras nocturnas dominicales y festivas (150%)"
    NIGHT_SURCHARGE = "Horas recargos nocturnos (35%)"
    HOLIDAY_DAILY_SURCHARGE = "Horas de recargo dominicales y festivas (75%)"
    HOLIDAY_NIGHT_SURCHARGE = "Horas de recargo nocturno dominicales y festivas (110%)"
    VACATION = "Vacaciones regulares"
    COMPENSATED_VACATION = "Vacaciones no tomadas"
    PRIMA = "Prima"
    NON_SALARY_PRIMA = "Prima no salarial"
    LAYOFFS = "Cesantías"
    LAYOFFS_INTEREST = "Intereses a las cesantías"
    INCAPACITY = "Incapacidad"
    MATERNITY_LEAVE = "Licencia de maternidad o paternidad"
    PAID_LEAVE = "Licencia remunerada"
    UNPAID_LEAVE = "Licencia no remunerada"
    SALARY_BONUS = "Bonificación salarial"
    NON_SALARY_BONUS = "Bonificación no salarial"
    SALARY_ASSISTANCE = "Auxilio salarial"
    NON_SALARY_ASSISTANCE = "Auxilio no salarial"
    OTHER_SALARY_INCOME = "Otro ingreso salarial"
    OTHER_NON_SALARY_INCOME = "Otro ingreso no salarial"
    ORDINARY_COMPENSATION = "Compensación ordinaria"
    EXTRAORDINARY_COMPENSATION = "Compensación extraordinaria"
    FOOD_VOUCHER = "Bono de alimentación"
    NON_SALARY_FOOD_VOUCHER = "Bono de alimentación no salarial"
    OTHER_VOUCHERS = "Otros bonos"
    OTHER_NON_SALARY_VOUCHERS = "Otros bonos no salariales"
    COMMISSIONS = "Comisiones"
    THIRD_PARTY_PAYMENTS = "Pago a terceros"
    ADVANCES = "Avances"
    ENDOWMENT = "Dotación"
    SUSTAINMENT_SUPPORT = "Apoyo de sostenimiento"
    TELECOMMUTING = "Teletrabajo"
    WITHDRAWAL_BONUS = "Bonificación por retiro"
    DISMISSAL_COMPENSATION = "Indemnización por despido"
    REFUND = "Reintegro"
    OTHER_CONCEPTS = "Otros conceptos"
    OTHER_NON_SALARY_CONCEPTS = "Otros conceptos no salariales"

    @classmethod
    def resolve(cls, label: Optional[str]) -> Optional["IncomeConcept"]:
        return _INCOME_BY_LABEL.get(normalize_text(label))


class DeductionConcept(str, Enum):
    HEALTH = "Salud"
    PENSION = "Pensión"
    PENSION_SECURITY_FUND = "Fondo de seguridad pensional"
    TRADE_UNION = "Sindicato"
    PUBLIC_SANCTION = "Sanción pública"
    PRIVATE_SANCTION = "Sanción privada"
    LIBRANZA = "Libranza"
    THIRD_PARTY_PAYMENTS = "Pago a terceros"
    ADVANCES = "Anticipos"
    OTHER_DEDUCTIONS = "Otras deducciones"
    VOLUNTARY_PENSION = "Pensión voluntaria"
    WITHHOLDING_SOURCE = "Retención en la fuente"
    AFC = "AFC"
    COOPERATIVE = "Cooperativa"
    TAX_LIEN = "Embargo fiscal"
    COMPLEMENTARY_PLAN = "Plan complementario"
    EDUCATION = "Educación"
    REFUND = "Reintegro"
    DEBT_PAYMENT = "Pago de deudas"
    SUBSISTENCE_FUND = "Fondo de subsistencia"

    @classmethod
    def resolve(cls, label: Optional[str]) -> Optional["DeductionConcept"]:
        return _DEDUCTION_BY_LABEL.get(normalize_text(label))


_INCOME_BY_LABEL = {normalize_text(c.value): c for c in IncomeConcept}
_DEDUCTION_BY_LABEL = {normalize_text(c.value): c for c in DeductionConcept}


def resolve_concept_type(label: Optional[str], declared: Optional[ConceptType] = None) -> Optional[ConceptType]:
    """
    Tipo de un concepto: el declarado o, si no viene, el catálogo donde aparece
    la etiqueta (ingresos primero)
    """
    if declared is not None:
        return declared
    if IncomeConcept.resolve(label) is not None:
        return ConceptType.INCOME
    if DeductionConcept.resolve(label) is not None:
        return ConceptType.DEDUCTION
    return None

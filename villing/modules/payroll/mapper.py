"""
Mapeo de conceptos de nómina al documento de nómina electrónica

Convierte la lista libre de conceptos de un empleado (ingresos y deducciones
con etiqueta, valor y cantidad) en la estructura fija que exige el proveedor
de nómina electrónica ante la DIAN.

Reglas de presencia:
- El salario es obligatorio: sin salario no hay documento válido
- Un concepto ausente se reporta como None (se omite), nunca como 0
- Las deducciones no pueden repetirse en el periodo
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from villing.common.numbers import ZERO
from villing.modules.payroll.concepts import (
    ConceptType, DeductionConcept, IncomeConcept, resolve_concept_type
)
from villing.modules.payroll.exceptions import MissingSalaryError
from villing.modules.payroll.lookups import DeductionLookup, IncomeLookup, coerce_concepts
from villing.modules.payroll.schemas import (
    BasicIncome, CompensationIncome, ConceptsTotals, DeductionOutput, HoursIncome,
    IncapacityIncome, IncomeOutput, LayoffsIncome, Libranza, LicensingPeriod,
    LicensingsIncome, PaymentItem, PayrollSummary, PensionSecurityFund,
    PercentagePayment, PrimasIncome, SalaryPayment, Sanction, TradeUnion,
    TransportIncome, VacationIncome, VacationPeriod, VoucherIncome
)

logger = logging.getLogger(__name__)

# Constantes del esquema del proveedor
LAYOFFS_INTEREST_PERCENTAGE = 12
HEALTH_PERCENTAGE = 25
PENSION_PERCENTAGE = 25
PENSION_SECURITY_FUND_PERCENTAGE = 1
GENERAL_INCAPACITY_TYPE_ID = 1


def _present(value: Optional[Decimal]) -> Optional[Decimal]:
    """0 y None significan 'no aplica'"""
    return value or None


# ===== INGRESOS =====

def _basic(incomes: IncomeLookup, worked_days: int) -> BasicIncome:
    salary = incomes.amount(IncomeConcept.SALARY)
    if not salary:
        raise MissingSalaryError()
    return BasicIncome(worked_days=worked_days, worker_salary=salary)


def _transports(incomes: IncomeLookup):
    return [TransportIncome(
        transportation_assistance=_present(incomes.amount(IncomeConcept.TRANSPORT_AID)),
        viatic=_present(incomes.amount(IncomeConcept.SALARY_VIATIC)),
        non_salary_viatic=_present(incomes.amount(IncomeConcept.NON_SALARY_VIATIC))
    )]


def _extra_hours(incomes: IncomeLookup, key: IncomeConcept):
    # Datos parciales se toman como horas no trabajadas
    payment = incomes.amount(key)
    quantity = incomes.quantity(key)

    if not payment or not quantity:
        return None

    return [HoursIncome(quantity=quantity, payment=payment)]


def _vacation(incomes: IncomeLookup) -> VacationIncome:
    return VacationIncome(
        common=[VacationPeriod(
            quantity=incomes.quantity(IncomeConcept.VACATION),
            payment=incomes.amount(IncomeConcept.VACATION)
        )],
        compensated=[VacationPeriod(
            quantity=incomes.quantity(IncomeConcept.COMPENSATED_VACATION),
            payment=incomes.amount(IncomeConcept.COMPENSATED_VACATION)
        )]
    )


def _primas(incomes: IncomeLookup) -> Optional[PrimasIncome]:
    payment = _present(incomes.amount(IncomeConcept.PRIMA))
    non_salary_payment = _present(incomes.amount(IncomeConcept.NON_SALARY_PRIMA))

    if not payment and not non_salary_payment:
        return None

    return PrimasIncome(
        quantity=incomes.quantity(IncomeConcept.PRIMA),
        payment=payment,
        non_salary_payment=non_salary_payment
    )


def _layoffs(incomes: IncomeLookup) -> LayoffsIncome:
    return LayoffsIncome(
        payment=incomes.amount(IncomeConcept.LAYOFFS),
        percentage=LAYOFFS_INTEREST_PERCENTAGE,
        interest_payment=incomes.amount(IncomeConcept.LAYOFFS_INTEREST)
    )


def _incapacities(incomes: IncomeLookup):
    return [IncapacityIncome(
        quantity=incomes.quantity(IncomeConcept.INCAPACITY),
        payment=incomes.amount(IncomeConcept.INCAPACITY),
        type_incapacity_id=GENERAL_INCAPACITY_TYPE_ID
    )]


def _licensings(incomes: IncomeLookup) -> LicensingsIncome:
    return LicensingsIncome(
        maternity_or_paternity_leaves=[LicensingPeriod(
            quantity=incomes.quantity(IncomeConcept.MATERNITY_LEAVE),
            payment=incomes.amount(IncomeConcept.MATERNITY_LEAVE)
        )],
        permit_or_paid_licenses=[LicensingPeriod(
            quantity=incomes.quantity(IncomeConcept.PAID_LEAVE),
            payment=incomes.amount(IncomeConcept.PAID_LEAVE)
        )],
        suspension_or_unpaid_leaves=[LicensingPeriod(
            quantity=incomes.quantity(IncomeConcept.UNPAID_LEAVE)
        )]
    )


def _salary_payments(incomes: IncomeLookup, salary_key: IncomeConcept, non_salary_key: IncomeConcept):
    payment = _present(incomes.amount(salary_key))
    non_salary_payment = _present(incomes.amount(non_salary_key))

    if not payment and not non_salary_payment:
        return None

    return [SalaryPayment(payment=payment, non_salary_payment=non_salary_payment)]


def _compensations(incomes: IncomeLookup):
    ordinary = _present(incomes.amount(IncomeConcept.ORDINARY_COMPENSATION))
    extraordinary = _present(incomes.amount(IncomeConcept.EXTRAORDINARY_COMPENSATION))

    if not ordinary and not extraordinary:
        return None

    return [CompensationIncome(ordinary=ordinary, extraordinary=extraordinary)]


def _vouchers(incomes: IncomeLookup):
    voucher = VoucherIncome(
        payment=_present(incomes.amount(IncomeConcept.OTHER_VOUCHERS)),
        non_salary_payment=_present(incomes.amount(IncomeConcept.OTHER_NON_SALARY_VOUCHERS)),
        salary_food_Payment=_present(incomes.amount(IncomeConcept.FOOD_VOUCHER)),
        non_salary_food_payment=_present(incomes.amount(IncomeConcept.NON_SALARY_FOOD_VOUCHER))
    )

    if not any((
        voucher.payment,
        voucher.non_salary_payment,
        voucher.salary_food_Payment,
        voucher.non_salary_food_payment
    )):
        return None

    return [voucher]


def _single_payment(lookup, key):
    payment = lookup.amount(key)
    if not payment:
        return None
    return [PaymentItem(payment=payment)]


def map_incomes(concepts: Iterable, worked_days: int) -> IncomeOutput:
    """
    Construir el objeto 'earn' del documento de nómina electrónica

    Args:
        concepts: Conceptos del empleado; si traen tipo, solo se usan los ingresos
        worked_days: Días trabajados en el periodo

    Raises:
        MissingSalaryError: si no hay concepto "Salario" (o vale 0)
    """
    incomes = IncomeLookup(concepts)

    return IncomeOutput(
        basic=_basic(incomes, worked_days),
        transports=_transports(incomes),
        daily_overtime=_extra_hours(incomes, IncomeConcept.DAILY_OVERTIME),
        overtime_night_hours=_extra_hours(incomes, IncomeConcept.NIGHT_OVERTIME),
        hours_night_surcharge=_extra_hours(incomes, IncomeConcept.NIGHT_SURCHARGE),
        sunday_and_holiday_daily_overtime=_extra_hours(incomes, IncomeConcept.HOLIDAY_DAILY_OVERTIME),
        daily_surcharge_hours_on_sundays_and_holidays=_extra_hours(incomes, IncomeConcept.HOLIDAY_DAILY_SURCHARGE),
        sunday_night_overtime_and_holidays=_extra_hours(incomes, IncomeConcept.HOLIDAY_NIGHT_OVERTIME),
        sunday_and_holidays_night_surcharge_hours=_extra_hours(incomes, IncomeConcept.HOLIDAY_NIGHT_SURCHARGE),
        vacation=_vacation(incomes),
        primas=_primas(incomes),
        layoffs=_layoffs(incomes),
        incapacities=_incapacities(incomes),
        licensings=_licensings(incomes),
        bonuses=_salary_payments(incomes, IncomeConcept.SALARY_BONUS, IncomeConcept.NON_SALARY_BONUS),
        assistances=_salary_payments(incomes, IncomeConcept.SALARY_ASSISTANCE, IncomeConcept.NON_SALARY_ASSISTANCE),
        legal_strikes=[],
        other_concepts=_salary_payments(incomes, IncomeConcept.OTHER_CONCEPTS, IncomeConcept.OTHER_NON_SALARY_CONCEPTS),
        compensations=_compensations(incomes),
        vouchers=_vouchers(incomes),
        comissions=[PaymentItem(payment=incomes.amount(IncomeConcept.COMMISSIONS))],
        third_party_payments=_single_payment(incomes, IncomeConcept.THIRD_PARTY_PAYMENTS),
        advances=_single_payment(incomes, IncomeConcept.ADVANCES),
        endowment=_present(incomes.amount(IncomeConcept.ENDOWMENT)),
        sustainment_support=_present(incomes.amount(IncomeConcept.SUSTAINMENT_SUPPORT)),
        telecommuting=_present(incomes.amount(IncomeConcept.TELECOMMUTING)),
        company_withdrawal_bonus=_present(incomes.amount(IncomeConcept.WITHDRAWAL_BONUS)),
        compensation=_present(incomes.amount(IncomeConcept.DISMISSAL_COMPENSATION)),
        refund=_present(incomes.amount(IncomeConcept.REFUND))
    )


# ===== DEDUCCIONES =====

def _libranzas(deductions: DeductionLookup):
    payment = deductions.amount(DeductionConcept.LIBRANZA)
    if not payment:
        return None
    return [Libranza(payment=payment, description=DeductionConcept.LIBRANZA.value)]


def map_deductions(concepts: Iterable) -> DeductionOutput:
    """
    Construir el objeto 'deduction' del documento de nómina electrónica

    Raises:
        DuplicateDeductionError: si una deducción aparece más de una vez
    """
    deductions = DeductionLookup(concepts)

    return DeductionOutput(
        health=PercentagePayment(
            percentage=HEALTH_PERCENTAGE,
            payment=deductions.amount(DeductionConcept.HEALTH)
        ),
        pension_fund=PercentagePayment(
            percentage=PENSION_PERCENTAGE,
            payment=deductions.amount(DeductionConcept.PENSION)
        ),
        pension_security_fund=PensionSecurityFund(
            payment=deductions.amount(DeductionConcept.PENSION_SECURITY_FUND),
            percentage=PENSION_SECURITY_FUND_PERCENTAGE,
            percentage_subsistence=0,
            payment_subsistence=0
        ),
        trade_unions=[TradeUnion(
            percentage=deductions.quantity(DeductionConcept.TRADE_UNION),
            payment=deductions.amount(DeductionConcept.TRADE_UNION)
        )],
        sanctions=[Sanction(
            payment_public=deductions.amount(DeductionConcept.PUBLIC_SANCTION),
            payment_private=deductions.amount(DeductionConcept.PRIVATE_SANCTION)
        )],
        libranzas=_libranzas(deductions),
        third_party_payments=_single_payment(deductions, DeductionConcept.THIRD_PARTY_PAYMENTS),
        advances=_single_payment(deductions, DeductionConcept.ADVANCES),
        other_deductions=_single_payment(deductions, DeductionConcept.OTHER_DEDUCTIONS),
        voluntary_pension=_present(deductions.amount(DeductionConcept.VOLUNTARY_PENSION)),
        withholding_source=_present(deductions.amount(DeductionConcept.WITHHOLDING_SOURCE)),
        afc=_present(deductions.amount(DeductionConcept.AFC)),
        cooperative=_present(deductions.amount(DeductionConcept.COOPERATIVE)),
        tax_lien=_present(deductions.amount(DeductionConcept.TAX_LIEN)),
        complementary_plans=_present(deductions.amount(DeductionConcept.COMPLEMENTARY_PLAN)),
        education=_present(deductions.amount(DeductionConcept.EDUCATION)),
        refund=_present(deductions.amount(DeductionConcept.REFUND)),
        debt=_present(deductions.amount(DeductionConcept.DEBT_PAYMENT))
    )


# ===== DOCUMENTO =====

def split_concepts(concepts: Iterable):
    """Separar conceptos en ingresos y deducciones (por tipo declarado o por catálogo)"""
    incomes, deductions = [], []

    for concept in coerce_concepts(concepts):
        if concept.type is None and IncomeConcept.resolve(concept.key_name) and DeductionConcept.resolve(concept.key_name):
            logger.warning(
                f"Payroll concept '{concept.key_name}' without type exists as income and deduction; counted as income"
            )
        concept_type = resolve_concept_type(concept.key_name, concept.type)
        if concept_type == ConceptType.INCOME:
            incomes.append(concept)
        elif concept_type == ConceptType.DEDUCTION:
            deductions.append(concept)

    return incomes, deductions


def calculate_concepts_totals(concepts: Iterable) -> ConceptsTotals:
    """Total devengado, total deducido y neto a pagar"""
    incomes, deductions = split_concepts(concepts)

    total_incomes = sum((c.amount or ZERO for c in incomes), ZERO)
    total_deductions = sum((c.amount or ZERO for c in deductions), ZERO)
    salary = IncomeLookup(incomes).amount(IncomeConcept.SALARY) or ZERO

    return ConceptsTotals(
        total_incomes=total_incomes,
        total_deductions=total_deductions,
        total=total_incomes - total_deductions,
        salary=salary
    )


def build_payroll_summary(concepts: Iterable, worked_days: int) -> PayrollSummary:
    """
    Construir la parte de conceptos y totales del documento de nómina electrónica

    Los datos de empleador, empleado y periodo los agrega quien envía el
    documento al proveedor.
    """
    incomes, deductions = split_concepts(concepts)
    totals = calculate_concepts_totals(incomes + deductions)

    summary = PayrollSummary(
        rounding=0,
        accrued_total=totals.total_incomes,
        deductions_total=totals.total_deductions,
        total=totals.total,
        earn=map_incomes(incomes, worked_days),
        deduction=map_deductions(deductions)
    )

    logger.debug(
        f"Payroll summary built: accrued={totals.total_incomes} "
        f"deductions={totals.total_deductions} total={totals.total}"
    )
    return summary

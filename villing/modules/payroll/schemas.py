"""
Esquemas de nómina electrónica

Los modelos de salida reproducen campo por campo el contrato del proveedor de
nómina electrónica (incluida su ortografía: "comissions",
"salary_food_Payment"). Un campo en None significa "no aplica en el periodo"
y se omite al serializar; un 0 se envía como 0.
"""

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from decimal import Decimal
from typing import Annotated, List, Optional, Union
from uuid import UUID

from villing.common.numbers import decimal_to_json_number, to_number
from villing.modules.payroll.concepts import ConceptType

Amount = Annotated[Decimal, PlainSerializer(decimal_to_json_number, when_used="json")]


class PayrollConcept(BaseModel):
    """Concepto de nómina (ingreso o deducción) de un empleado en el periodo"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, frozen=True)

    id: Optional[Union[UUID, str]] = None
    key_name: str = Field(..., alias="keyName", description="Etiqueta del concepto (ej. 'Salario')")
    amount: Optional[Decimal] = Field(None, description="Valor en pesos")
    quantity: Optional[Decimal] = Field(None, description="Días, horas o porcentaje según el concepto")
    type: Optional[ConceptType] = None

    @field_validator("amount", "quantity", mode="before")
    @classmethod
    def parse_number(cls, v):
        return to_number(v)


class GatewayModel(BaseModel):
    def to_payload(self) -> dict:
        """Diccionario JSON para el proveedor, sin los campos que no aplican"""
        return self.model_dump(mode="json", exclude_none=True)


# ===== INGRESOS (earn) =====

class BasicIncome(GatewayModel):
    worked_days: int
    worker_salary: Amount


class TransportIncome(GatewayModel):
    transportation_assistance: Optional[Amount] = None
    viatic: Optional[Amount] = None
    non_salary_viatic: Optional[Amount] = None


class HoursIncome(GatewayModel):
    quantity: Amount
    payment: Amount


class VacationPeriod(GatewayModel):
    quantity: Optional[Amount] = None
    payment: Optional[Amount] = None


class VacationIncome(GatewayModel):
    common: List[VacationPeriod]
    compensated: List[VacationPeriod]


class PrimasIncome(GatewayModel):
    quantity: Optional[Amount] = None
    payment: Optional[Amount] = None
    non_salary_payment: Optional[Amount] = None


class LayoffsIncome(GatewayModel):
    payment: Optional[Amount] = None
    percentage: int
    interest_payment: Optional[Amount] = None


class IncapacityIncome(GatewayModel):
    quantity: Optional[Amount] = None
    payment: Optional[Amount] = None
    type_incapacity_id: int


class LicensingPeriod(GatewayModel):
    quantity: Optional[Amount] = None
    payment: Optional[Amount] = None


class LicensingsIncome(GatewayModel):
    maternity_or_paternity_leaves: List[LicensingPeriod]
    permit_or_paid_licenses: List[LicensingPeriod]
    suspension_or_unpaid_leaves: List[LicensingPeriod]


class LegalStrike(GatewayModel):
    quantity: Optional[Amount] = None


class SalaryPayment(GatewayModel):
    payment: Optional[Amount] = None
    non_salary_payment: Optional[Amount] = None


class CompensationIncome(GatewayModel):
    ordinary: Optional[Amount] = None
    extraordinary: Optional[Amount] = None


class VoucherIncome(GatewayModel):
    payment: Optional[Amount] = None
    non_salary_payment: Optional[Amount] = None
    salary_food_Payment: Optional[Amount] = None
    non_salary_food_payment: Optional[Amount] = None


class PaymentItem(GatewayModel):
    payment: Optional[Amount] = None


class IncomeOutput(GatewayModel):
    basic: BasicIncome
    transports: List[TransportIncome]
    daily_overtime: Optional[List[HoursIncome]] = None
    overtime_night_hours: Optional[List[HoursIncome]] = None
    hours_night_surcharge: Optional[List[HoursIncome]] = None
    sunday_and_holiday_daily_overtime: Optional[List[HoursIncome]] = None
    daily_surcharge_hours_on_sundays_and_holidays: Optional[List[HoursIncome]] = None
    sunday_night_overtime_and_holidays: Optional[List[HoursIncome]] = None
    sunday_and_holidays_night_surcharge_hours: Optional[List[HoursIncome]] = None
    vacation: VacationIncome
    primas: Optional[PrimasIncome] = None
    layoffs: LayoffsIncome
    incapacities: List[IncapacityIncome]
    licensings: LicensingsIncome
    bonuses: Optional[List[SalaryPayment]] = None
    assistances: Optional[List[SalaryPayment]] = None
    legal_strikes: List[LegalStrike] = []
    other_concepts: Optional[List[SalaryPayment]] = None
    compensations: Optional[List[CompensationIncome]] = None
    vouchers: Optional[List[VoucherIncome]] = None
    comissions: List[PaymentItem]
    third_party_payments: Optional[List[PaymentItem]] = None
    advances: Optional[List[PaymentItem]] = None
    endowment: Optional[Amount] = None
    sustainment_support: Optional[Amount] = None
    telecommuting: Optional[Amount] = None
    company_withdrawal_bonus: Optional[Amount] = None
    compensation: Optional[Amount] = None
    refund: Optional[Amount] = None


# ===== DEDUCCIONES (deduction) =====

class PercentagePayment(GatewayModel):
    percentage: int
    payment: Optional[Amount] = None


class PensionSecurityFund(GatewayModel):
    payment: Optional[Amount] = None
    percentage: int
    percentage_subsistence: int = 0
    payment_subsistence: int = 0


class TradeUnion(GatewayModel):
    percentage: Optional[Amount] = None
    payment: Optional[Amount] = None


class Sanction(GatewayModel):
    payment_public: Optional[Amount] = None
    payment_private: Optional[Amount] = None


class Libranza(GatewayModel):
    payment: Amount
    description: str


class DeductionOutput(GatewayModel):
    health: PercentagePayment
    pension_fund: PercentagePayment
    pension_security_fund: PensionSecurityFund
    trade_unions: List[TradeUnion]
    sanctions: List[Sanction]
    libranzas: Optional[List[Libranza]] = None
    third_party_payments: Optional[List[PaymentItem]] = None
    advances: Optional[List[PaymentItem]] = None
    other_deductions: Optional[List[PaymentItem]] = None
    voluntary_pension: Optional[Amount] = None
    withholding_source: Optional[Amount] = None
    afc: Optional[Amount] = None
    cooperative: Optional[Amount] = None
    tax_lien: Optional[Amount] = None
    complementary_plans: Optional[Amount] = None
    education: Optional[Amount] = None
    refund: Optional[Amount] = None
    debt: Optional[Amount] = None


# ===== DOCUMENTO Y TOTALES =====

class ConceptsTotals(BaseModel):
    total_incomes: Decimal
    total_deductions: Decimal
    total: Decimal
    salary: Decimal


class PayrollSummary(GatewayModel):
    """Parte del documento de nómina electrónica que depende de los conceptos"""
    rounding: int = 0
    accrued_total: Amount
    deductions_total: Amount
    total: Amount
    earn: IncomeOutput
    deduction: DeductionOutput


class PayrollMappingRequest(BaseModel):
    concepts: List[PayrollConcept]
    worked_days: int = Field(30, ge=0, le=31, description="Días trabajados en el periodo")


class ConceptValidationRequest(BaseModel):
    concepts: List[PayrollConcept]


class ConceptValidation(BaseModel):
    errors: List[str]
    concepts: List[PayrollConcept]
    salary: Decimal


class DefaultConceptsRequest(BaseModel):
    salary: Decimal = Field(..., ge=0, description="Salario del periodo")
    worked_days: int = Field(30, ge=0, le=31)
    base_salary: Optional[Decimal] = Field(None, ge=0, description="Salario mensual; por defecto se deduce de los días")
    has_transport_aid: Optional[bool] = Field(None, description="Por defecto, si el salario base no supera 2 salarios mínimos")


class DefaultConcepts(BaseModel):
    incomes: List[PayrollConcept]
    deductions: List[PayrollConcept]

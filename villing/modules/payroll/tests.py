"""
Tests para el módulo de Nómina Electrónica

Tests que cubren:
- Resolución de etiquetas del catálogo (mayúsculas, tildes, espacios)
- Mapeo de ingresos y deducciones al documento del proveedor
- Omisión de conceptos que no aplican
- Errores de integridad (salario faltante, deducciones repetidas)
- Calculadoras y conceptos por defecto
- Validación de conceptos
- Endpoints REST
"""

import logging
import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from villing.common.numbers import round_currency
from villing.main import app
from villing.modules.payroll.concepts import (
    ConceptType, DeductionConcept, IncomeConcept, resolve_concept_type
)
from villing.modules.payroll.definitions import (
    DEFINITIONS, MANDATORY_DEFINITIONS, ConceptSubType, PeriodFrequency,
    adjust_concepts_to_base_salary, base_salary_from_portion_by_frequency,
    frequency_by_range, get_default_deductions, get_default_incomes, get_definition,
    has_transport_aid_right, lay_off_interests_value, lay_off_value,
    novelty_value_by_frequency, percent_of_salary_value,
    portion_from_full_value_by_days_worked, quantity_value, worked_days_by_frequency
)
from villing.modules.payroll.exceptions import (
    DuplicateDeductionError, MissingSalaryError, PayrollDataIntegrityError
)
from villing.modules.payroll.lookups import DeductionLookup, IncomeLookup
from villing.modules.payroll.mapper import (
    build_payroll_summary, calculate_concepts_totals, map_deductions, map_incomes
)
from villing.modules.payroll.schemas import PayrollConcept, VacationPeriod
from villing.modules.payroll.validation import validate_concepts


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def salary_concept():
    return {"keyName": "Salario", "amount": 1300000, "quantity": 30, "type": "income"}


@pytest.fixture
def employee_concepts(salary_concept):
    """Nómina mensual de un empleado con salario mínimo"""
    return [
        salary_concept,
        {"keyName": "Auxilio de transporte", "amount": 162000, "quantity": 30, "type": "income"},
        {"keyName": "Horas diurnas extras (25%)", "amount": 33854, "quantity": 5, "type": "income"},
        {"keyName": "Prima", "amount": 108333, "quantity": 0, "type": "income"},
        {"keyName": "Cesantías", "amount": 108333, "quantity": 30, "type": "income"},
        {"keyName": "Intereses a las cesantías", "amount": 1083, "quantity": 0, "type": "income"},
        {"keyName": "Bonificación salarial", "amount": 100000, "quantity": 0, "type": "income"},
        {"keyName": "Dotación", "amount": 0, "quantity": 0, "type": "income"},
        {"keyName": "Salud", "amount": 52000, "quantity": 0, "type": "deduction"},
        {"keyName": "Pensión", "amount": 52000, "quantity": 0, "type": "deduction"},
        {"keyName": "Libranza", "amount": 80000, "quantity": 0, "type": "deduction"},
    ]


@pytest.fixture
def mandatory_concepts():
    return [
        {"keyName": "Salario", "amount": 1300000, "quantity": 30, "type": "income"},
        {"keyName": "Prima", "amount": 108333, "quantity": 0, "type": "income"},
        {"keyName": "Cesantías", "amount": 108333, "quantity": 30, "type": "income"},
        {"keyName": "Intereses a las cesantías", "amount": 1083, "quantity": 0, "type": "income"},
        {"keyName": "Salud", "amount": 52000, "quantity": 0, "type": "deduction"},
        {"keyName": "Pensión", "amount": 52000, "quantity": 0, "type": "deduction"},
    ]


# ===== TESTS DEL CATÁLOGO =====

class TestConceptCatalog:
    """Tests para la resolución de etiquetas"""

    def test_resolve_exact_label(self):
        assert IncomeConcept.resolve("Salario") == IncomeConcept.SALARY
        assert DeductionConcept.resolve("Sindicato") == DeductionConcept.TRADE_UNION

    @pytest.mark.parametrize("label", ["salario", "  SALARIO ", "Salário", "SaLaRiO"])
    def test_resolve_ignores_case_accents_and_spaces(self, label):
        assert IncomeConcept.resolve(label) == IncomeConcept.SALARY

    def test_resolve_without_accents(self):
        assert IncomeConcept.resolve("cesantias") == IncomeConcept.LAYOFFS
        assert DeductionConcept.resolve("pension") == DeductionConcept.PENSION
        assert DeductionConcept.resolve("retencion en la fuente") == DeductionConcept.WITHHOLDING_SOURCE

    def test_unknown_label(self):
        assert IncomeConcept.resolve("Propina") is None
        assert DeductionConcept.resolve(None) is None

    def test_concept_type(self):
        assert resolve_concept_type("Salud") == ConceptType.DEDUCTION
        assert resolve_concept_type("Dotación") == ConceptType.INCOME
        assert resolve_concept_type("Reintegro") == ConceptType.INCOME
        assert resolve_concept_type("Reintegro", ConceptType.DEDUCTION) == ConceptType.DEDUCTION
        assert resolve_concept_type("Propina") is None


class TestLookups:
    """Ingresos: gana el primero. Deducciones: no pueden repetirse"""

    def test_income_first_match_wins(self, salary_concept):
        lookup = IncomeLookup([
            salary_concept,
            {"keyName": "Bonificación salarial", "amount": 100},
            {"keyName": "bonificacion salarial", "amount": 200},
        ])
        assert lookup.amount(IncomeConcept.SALARY_BONUS) == Decimal("100")
        assert lookup.amount(IncomeConcept.SALARY_BONUS) == Decimal("100")

    def test_deduction_duplicate_raises_on_lookup(self):
        lookup = DeductionLookup([
            {"keyName": "Sindicato", "amount": 100},
            {"keyName": "Sindicato", "amount": 200},
            {"keyName": "Salud", "amount": 52000},
        ])

        assert lookup.amount(DeductionConcept.HEALTH) == Decimal("52000")
        with pytest.raises(DuplicateDeductionError) as exc_info:
            lookup.get(DeductionConcept.TRADE_UNION)
        assert exc_info.value.concept == "Sindicato"

    def test_declared_type_filters_shared_labels(self):
        concepts = [
            {"keyName": "Reintegro", "amount": 3000, "type": "income"},
            {"keyName": "Reintegro", "amount": 5000, "type": "deduction"},
        ]
        assert IncomeLookup(concepts).amount(IncomeConcept.REFUND) == Decimal("3000")
        assert DeductionLookup(concepts).amount(DeductionConcept.REFUND) == Decimal("5000")

    def test_unknown_labels_are_logged_and_ignored(self, salary_concept, caplog):
        with caplog.at_level(logging.WARNING, logger="villing.modules.payroll.lookups"):
            lookup = IncomeLookup([salary_concept, {"keyName": "Propina", "amount": 1000}])

        assert lookup.amount(IncomeConcept.SALARY) == Decimal("1300000")
        assert "Propina" in caplog.text

    def test_missing_concept(self):
        lookup = IncomeLookup([])
        assert lookup.get(IncomeConcept.SALARY) is None
        assert lookup.amount(IncomeConcept.SALARY) is None
        assert lookup.quantity(IncomeConcept.SALARY) is None

    def test_numbers_are_parsed(self):
        lookup = IncomeLookup([{"keyName": "Salario", "amount": "1,300,000", "quantity": "abc"}])
        assert lookup.amount(IncomeConcept.SALARY) == Decimal("1300000")
        assert lookup.quantity(IncomeConcept.SALARY) == Decimal("0")


# ===== TESTS DE INGRESOS =====

class TestMapIncomes:
    """Tests para map_incomes"""

    def test_salary_is_required(self):
        with pytest.raises(MissingSalaryError, match="El salario no puede ser nulo"):
            map_incomes([], 30)

    def test_zero_salary_is_rejected(self):
        with pytest.raises(PayrollDataIntegrityError):
            map_incomes([{"keyName": "Salario", "amount": 0}], 30)

    def test_salary_only(self):
        earn = map_incomes([{"keyName": "Salario", "amount": 1000000}], 30)

        assert earn.basic.worked_days == 30
        assert earn.basic.worker_salary == Decimal("1000000")
        assert earn.endowment is None
        assert earn.sustainment_support is None
        assert earn.telecommuting is None
        assert earn.company_withdrawal_bonus is None
        assert earn.compensation is None
        assert earn.refund is None

    def test_vacation_scenario(self, salary_concept):
        earn = map_incomes([
            salary_concept,
            {"keyName": "Vacaciones regulares", "amount": 300000, "quantity": 15},
        ], 30)

        assert earn.vacation.common == [VacationPeriod(quantity=Decimal("15"), payment=Decimal("300000"))]
        assert earn.vacation.compensated == [VacationPeriod(quantity=None, payment=None)]

        payload = earn.to_payload()
        assert payload["vacation"] == {
            "common": [{"quantity": 15, "payment": 300000}],
            "compensated": [{}]
        }

    def test_overtime_requires_payment_and_quantity(self, salary_concept):
        earn = map_incomes([
            salary_concept,
            {"keyName": "Horas diurnas extras (25%)", "amount": 33854, "quantity": 5},
            {"keyName": "Horas nocturnas extras (75%)", "amount": 20000},
            {"keyName": "Horas recargos nocturnos (35%)", "amount": 0, "quantity": 3},
        ], 30)

        assert earn.daily_overtime[0].quantity == Decimal("5")
        assert earn.daily_overtime[0].payment == Decimal("33854")
        assert earn.overtime_night_hours is None
        assert earn.hours_night_surcharge is None
        assert earn.sunday_and_holiday_daily_overtime is None

    def test_alternatives_present_when_any_present(self, salary_concept):
        earn = map_incomes([
            salary_concept,
            {"keyName": "Bonificación no salarial", "amount": 50000},
            {"keyName": "Compensación ordinaria", "amount": 0},
        ], 30)

        assert len(earn.bonuses) == 1
        assert earn.bonuses[0].payment is None
        assert earn.bonuses[0].non_salary_payment == Decimal("50000")
        assert earn.assistances is None
        assert earn.other_concepts is None
        assert earn.compensations is None
        assert earn.vouchers is None

    def test_vouchers(self, salary_concept):
        earn = map_incomes([
            salary_concept,
            {"keyName": "Bono de alimentación", "amount": 120000},
        ], 30)

        assert earn.to_payload()["vouchers"] == [{"salary_food_Payment": 120000}]

    def test_composite_fields_always_present(self, salary_concept):
        payload = map_incomes([salary_concept], 30).to_payload()

        assert payload["transports"] == [{}]
        assert payload["layoffs"] == {"percentage": 12}
        assert payload["incapacities"] == [{"type_incapacity_id": 1}]
        assert payload["licensings"] == {
            "maternity_or_paternity_leaves": [{}],
            "permit_or_paid_licenses": [{}],
            "suspension_or_unpaid_leaves": [{}]
        }
        assert payload["legal_strikes"] == []
        assert payload["comissions"] == [{}]
        assert "primas" not in payload
        assert "endowment" not in payload

    def test_full_employee(self, employee_concepts):
        payload = map_incomes(employee_concepts, 30).to_payload()

        assert payload["basic"] == {"worked_days": 30, "worker_salary": 1300000}
        assert payload["transports"] == [{"transportation_assistance": 162000}]
        assert payload["daily_overtime"] == [{"quantity": 5, "payment": 33854}]
        assert payload["primas"] == {"quantity": 0, "payment": 108333}
        assert payload["layoffs"] == {"payment": 108333, "percentage": 12, "interest_payment": 1083}
        assert payload["bonuses"] == [{"payment": 100000}]
        # Dotación en 0 no aplica
        assert "endowment" not in payload

    def test_deductions_are_ignored(self, employee_concepts):
        earn = map_incomes(employee_concepts, 30)
        assert earn.refund is None
        assert earn.third_party_payments is None

    def test_accepts_schema_instances(self):
        earn = map_incomes([PayrollConcept(key_name="Salario", amount=Decimal("900000"))], 15)
        assert earn.basic.worked_days == 15


# ===== TESTS DE DEDUCCIONES =====

class TestMapDeductions:
    """Tests para map_deductions"""

    def test_duplicate_trade_union(self):
        with pytest.raises(DuplicateDeductionError, match="Solo puede haber 1 Sindicato"):
            map_deductions([
                {"keyName": "Sindicato", "amount": 100},
                {"keyName": "Sindicato", "amount": 200},
            ])

    def test_duplicate_with_different_spelling(self):
        with pytest.raises(DuplicateDeductionError, match="Solo puede haber 1 Salud"):
            map_deductions([
                {"keyName": "Salud", "amount": 52000},
                {"keyName": " SALUD", "amount": 52000},
            ])

    def test_constant_percentages(self):
        payload = map_deductions([
            {"keyName": "Salud", "amount": 52000},
            {"keyName": "Pensión", "amount": 52000},
        ]).to_payload()

        assert payload["health"] == {"percentage": 25, "payment": 52000}
        assert payload["pension_fund"] == {"percentage": 25, "payment": 52000}
        assert payload["pension_security_fund"] == {
            "percentage": 1,
            "percentage_subsistence": 0,
            "payment_subsistence": 0
        }
        assert payload["trade_unions"] == [{}]
        assert payload["sanctions"] == [{}]
        assert "libranzas" not in payload
        assert "withholding_source" not in payload

    def test_trade_union_percentage_comes_from_quantity(self):
        deduction = map_deductions([{"keyName": "Sindicato", "amount": 13000, "quantity": 1}])
        assert deduction.trade_unions[0].percentage == Decimal("1")
        assert deduction.trade_unions[0].payment == Decimal("13000")

    def test_libranza_and_optional_scalars(self):
        payload = map_deductions([
            {"keyName": "Libranza", "amount": 80000},
            {"keyName": "Retención en la fuente", "amount": 15000},
            {"keyName": "Pago de deudas", "amount": 40000},
            {"keyName": "Anticipos", "amount": 100000},
        ]).to_payload()

        assert payload["libranzas"] == [{"payment": 80000, "description": "Libranza"}]
        assert payload["withholding_source"] == 15000
        assert payload["debt"] == 40000
        assert payload["advances"] == [{"payment": 100000}]

    def test_empty_deductions(self):
        deduction = map_deductions([])
        assert deduction.health.payment is None
        assert deduction.libranzas is None


# ===== TESTS DEL DOCUMENTO =====

class TestPayrollSummary:

    def test_concepts_totals(self, employee_concepts):
        totals = calculate_concepts_totals(employee_concepts)

        assert totals.total_incomes == Decimal("1813603")
        assert totals.total_deductions == Decimal("184000")
        assert totals.total == Decimal("1629603")
        assert totals.salary == Decimal("1300000")

    def test_summary_payload(self, employee_concepts):
        payload = build_payroll_summary(employee_concepts, 30).to_payload()

        assert payload["rounding"] == 0
        assert payload["accrued_total"] == 1813603
        assert payload["deductions_total"] == 184000
        assert payload["total"] == 1629603
        assert payload["earn"]["basic"]["worker_salary"] == 1300000
        assert payload["deduction"]["libranzas"] == [{"payment": 80000, "description": "Libranza"}]

    def test_untyped_concepts_use_catalog(self):
        summary = build_payroll_summary([
            {"keyName": "Salario", "amount": 1000000},
            {"keyName": "Salud", "amount": 40000},
            {"keyName": "Propina", "amount": 5000},
        ], 30)

        assert summary.accrued_total == Decimal("1000000")
        assert summary.deductions_total == Decimal("40000")
        assert summary.deduction.health.payment == Decimal("40000")

    def test_untyped_shared_label_is_logged(self, caplog):
        """Un 'Reintegro' sin tipo cuenta como ingreso y queda advertido en el log"""
        with caplog.at_level(logging.WARNING, logger="villing.modules.payroll.mapper"):
            totals = calculate_concepts_totals([
                {"keyName": "Salario", "amount": 1000000},
                {"keyName": "Reintegro", "amount": 20000},
            ])

        assert totals.total_incomes == Decimal("1020000")
        assert totals.total_deductions == Decimal("0")
        assert "Reintegro" in caplog.text

    def test_typed_shared_label_is_not_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="villing.modules.payroll.mapper"):
            totals = calculate_concepts_totals([
                {"keyName": "Salario", "amount": 1000000},
                {"keyName": "Reintegro", "amount": 20000, "type": "deduction"},
            ])

        assert totals.total_deductions == Decimal("20000")
        assert "Reintegro" not in caplog.text

    def test_summary_requires_salary(self):
        with pytest.raises(MissingSalaryError):
            build_payroll_summary([{"keyName": "Salud", "amount": 40000}], 30)


# ===== TESTS DE DEFINICIONES Y CALCULADORAS =====

class TestDefinitions:

    def test_catalog_size(self):
        assert len(DEFINITIONS) == len(IncomeConcept) + len(DeductionConcept)

    def test_mandatory_definitions(self):
        assert [d.key_name.value for d in MANDATORY_DEFINITIONS] == [
            "Salario", "Prima", "Cesantías", "Intereses a las cesantías", "Salud", "Pensión"
        ]

    def test_get_definition(self):
        assert get_definition("cesantias").sub_type == ConceptSubType.LAY_OFF
        assert get_definition("Horas diurnas extras (25%)").percentage == Decimal("25")
        assert get_definition("Reintegro", ConceptType.DEDUCTION).type == ConceptType.DEDUCTION
        assert get_definition("Propina") is None


class TestCalculators:

    def test_quantity(self):
        """Valor hora 10.000 con recargo del 25% por 5 horas"""
        assert quantity_value(2400000, 25, 5) == Decimal("62500")

    def test_quantity_with_multiplier(self):
        """15 días de vacaciones de 8 horas"""
        assert quantity_value(2400000, 0, 15, 8) == Decimal("1200000")

    def test_percent_of_salary(self):
        assert percent_of_salary_value(1300000, 4) == Decimal("52000")

    def test_lay_off(self):
        assert round_currency(lay_off_value(1300000, 30)) == Decimal("108333")

    def test_lay_off_interests(self):
        assert round_currency(lay_off_interests_value(1300000, 30)) == Decimal("1083")
        assert lay_off_interests_value(1300000, 0) == Decimal("0")

    def test_portion_by_days_worked(self):
        assert portion_from_full_value_by_days_worked(162000, 30) == Decimal("162000")
        assert portion_from_full_value_by_days_worked(162000, 15) == Decimal("81000")
        assert portion_from_full_value_by_days_worked(162000, 7) == Decimal("40500")
        assert portion_from_full_value_by_days_worked(162000, 12) == Decimal("0")

    def test_frequencies(self):
        assert worked_days_by_frequency(PeriodFrequency.BIWEEKLY) == 15
        assert frequency_by_range(7) == PeriodFrequency.WEEKLY
        assert frequency_by_range(10) == PeriodFrequency.TEN_DAYS
        assert frequency_by_range(16) == PeriodFrequency.BIWEEKLY
        assert frequency_by_range(31) == PeriodFrequency.MONTHLY
        assert base_salary_from_portion_by_frequency(PeriodFrequency.BIWEEKLY, 650000) == Decimal("1300000")
        assert novelty_value_by_frequency(PeriodFrequency.WEEKLY, 100000) == Decimal("25000")

    def test_transport_aid_right(self):
        assert has_transport_aid_right(1300000)
        assert not has_transport_aid_right(5000000)


class TestDefaultConcepts:

    def test_default_incomes_biweekly(self):
        incomes = get_default_incomes(
            salary=650000, days_worked=15, base_salary=1300000, has_transport_aid=True
        )
        by_name = {c.key_name: c for c in incomes}

        assert list(by_name) == [
            "Salario", "Prima", "Cesantías", "Intereses a las cesantías", "Auxilio de transporte"
        ]
        assert by_name["Salario"].amount == Decimal("650000")
        assert by_name["Prima"].amount == Decimal("54167")
        assert by_name["Cesantías"].amount == Decimal("54167")
        assert by_name["Cesantías"].quantity == Decimal("15")
        assert by_name["Intereses a las cesantías"].amount == Decimal("271")
        assert by_name["Auxilio de transporte"].amount == Decimal("81000")
        assert all(c.type == ConceptType.INCOME for c in incomes)
        assert len({c.id for c in incomes}) == len(incomes)

    def test_default_incomes_without_transport_aid(self):
        incomes = get_default_incomes(
            salary=5000000, days_worked=30, base_salary=5000000, has_transport_aid=False
        )
        assert "Auxilio de transporte" not in [c.key_name for c in incomes]

    def test_default_deductions(self):
        deductions = get_default_deductions(1300000)

        assert [(c.key_name, c.amount) for c in deductions] == [
            ("Salud", Decimal("52000")),
            ("Pensión", Decimal("52000")),
        ]

    def test_adjust_to_new_salary(self):
        adjusted = adjust_concepts_to_base_salary([
            {"keyName": "Salario", "amount": 1000000, "type": "income"},
            {"keyName": "Salud", "amount": 40000, "type": "deduction"},
            {"keyName": "Bonificación salarial", "amount": 70000, "type": "income"},
            {"keyName": "Propina", "amount": 5000},
        ], salary=1300000, days_worked=30, base_salary=1300000)

        assert [c.amount for c in adjusted] == [
            Decimal("1300000"), Decimal("52000"), Decimal("70000"), Decimal("5000")
        ]


# ===== TESTS DE VALIDACIÓN =====

class TestValidateConcepts:

    def test_missing_mandatory_concepts(self):
        result = validate_concepts([])

        assert result.errors == [
            'El concepto "salario" es obligatorio',
            'El concepto "prima" es obligatorio',
            'El concepto "cesantías" es obligatorio',
            'El concepto "intereses a las cesantías" es obligatorio',
            'El concepto "salud" es obligatorio',
            'El concepto "pensión" es obligatorio',
        ]
        assert result.concepts == []
        assert result.salary == Decimal("0")

    def test_valid_concepts(self, mandatory_concepts):
        result = validate_concepts(mandatory_concepts + [
            {"keyName": "Vacaciones regulares", "amount": 300000, "quantity": 15, "type": "income"},
        ])

        assert result.errors == []
        assert len(result.concepts) == 7
        assert result.salary == Decimal("1300000")

    def test_vacation_days_must_be_integer(self, mandatory_concepts):
        result = validate_concepts(mandatory_concepts + [
            {"keyName": "Vacaciones regulares", "amount": 300000, "quantity": 1.5, "type": "income"},
        ])
        assert result.errors == ["Las vacaciones deben ser un número entero"]
        assert result.concepts == []

    def test_repeated_concepts(self, mandatory_concepts):
        result = validate_concepts(mandatory_concepts + [
            {"keyName": "Bonificación salarial", "amount": 1000, "type": "income"},
            {"keyName": "Bonificación salarial", "amount": 2000, "type": "income"},
        ])
        assert result.errors == ["No pueden haber conceptos repetidos"]

    def test_shared_label_on_both_sides(self, mandatory_concepts):
        result = validate_concepts(mandatory_concepts + [
            {"keyName": "Reintegro", "amount": 1000, "type": "income"},
            {"keyName": "Reintegro", "amount": 2000, "type": "deduction"},
        ])
        assert result.errors == []

    def test_malformed_concepts(self):
        result = validate_concepts([{"amount": 1000}])
        assert result.errors
        assert result.concepts == []


# ===== TESTS DE API =====

class TestPayrollAPI:
    """Tests de integración para endpoints"""

    def test_list_concepts(self):
        response = client.get("/payroll/concepts")
        assert response.status_code == 200

        data = response.json()
        assert len(data) == len(DEFINITIONS)
        assert data[0]["key_name"] == "Salario"
        assert data[0]["required"] is True

    def test_default_concepts(self):
        response = client.post("/payroll/concepts/defaults", json={
            "salary": 1300000,
            "worked_days": 30
        })
        assert response.status_code == 200

        data = response.json()
        assert [c["keyName"] for c in data["incomes"]][-1] == "Auxilio de transporte"
        assert [c["keyName"] for c in data["deductions"]] == ["Salud", "Pensión"]

    def test_validate_concepts_endpoint(self, mandatory_concepts):
        response = client.post("/payroll/concepts/validate", json={"concepts": mandatory_concepts})
        assert response.status_code == 200
        assert response.json()["errors"] == []

    def test_electronic_payroll(self, employee_concepts):
        response = client.post("/payroll/electronic-payroll", json={
            "concepts": employee_concepts,
            "worked_days": 30
        })
        assert response.status_code == 200

        data = response.json()
        assert data["earn"]["basic"] == {"worked_days": 30, "worker_salary": 1300000}
        assert data["deduction"]["health"] == {"percentage": 25, "payment": 52000}
        assert "endowment" not in data["earn"]
        assert data["total"] == 1629603

    def test_electronic_payroll_without_salary(self):
        response = client.post("/payroll/electronic-payroll", json={
            "concepts": [{"keyName": "Salud", "amount": 52000}]
        })
        assert response.status_code == 422
        assert response.json()["detail"] == "El salario no puede ser nulo"

    def test_electronic_payroll_duplicate_deduction(self, salary_concept):
        response = client.post("/payroll/electronic-payroll", json={
            "concepts": [
                salary_concept,
                {"keyName": "Sindicato", "amount": 100, "type": "deduction"},
                {"keyName": "Sindicato", "amount": 200, "type": "deduction"},
            ]
        })
        assert response.status_code == 422
        assert response.json()["detail"] == "Solo puede haber 1 Sindicato"

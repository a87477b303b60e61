"""
Tests para el módulo de Cálculos de Facturación

Tests que cubren:
- Totales por línea con impuesto excluido e incluido
- Descuentos por porcentaje y por valor
- Totales de documento, retención y devoluciones
- Desglose de impuestos por tarifa
- Políticas por tipo de documento
- Propagación de NaN/Infinity
- Endpoints REST
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from villing.main import app
from villing.modules.invoice_math.calculator import (
    AggregateTotals, add_percentage, calculate_aggregate, calculate_line_total,
    calculate_tax_breakdown, remove_percentage
)
from villing.modules.invoice_math.documents import (
    calculate_document_totals, validate_document_items
)
from villing.modules.invoice_math.schemas import (
    CalculationConfig, DiscountMode, DocumentType, LineItem
)


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def tax_excluded():
    return CalculationConfig(tax_included=False, retention=Decimal("0"))


@pytest.fixture
def tax_included():
    return CalculationConfig(tax_included=True, retention=Decimal("0"))


@pytest.fixture
def sample_item():
    """Línea de ejemplo: 2 unidades a $50.000 con 10% de descuento e IVA 19%"""
    return {"quantity": 2, "price": 50000, "discount": 10, "tax": 19}


@pytest.fixture
def sample_items():
    """Documento con tarifas de IVA 19%, 5% y exento"""
    return [
        {"name": "Camisa", "quantity": 2, "price": 50000, "discount": 10, "tax": 19},
        {"name": "Arroz", "quantity": 3, "price": 4333, "discount": 0, "tax": 5},
        {"name": "Libro", "quantity": 1, "price": 35000, "discount": 5, "tax": 0},
        {"name": "Pantalón", "quantity": 1, "price": 89990, "discount": 0, "tax": 19},
    ]


def _assert_reconciles(totals: AggregateTotals):
    expected = totals.subtotal - totals.total_discount + totals.total_tax - totals.total_retention
    assert totals.total == expected


# ===== TESTS DE TOTALES POR LÍNEA =====

class TestLineTotals:
    """Tests para calculate_line_total"""

    def test_tax_excluded_scenario(self, sample_item, tax_excluded):
        """2 x 50.000, 10% descuento, IVA 19%: total 107.100"""
        line = calculate_line_total(sample_item, tax_excluded)

        assert line.line_subtotal == Decimal("100000")
        assert line.line_discount == Decimal("10000")
        assert line.line_tax == Decimal("17100")
        assert line.line_total == Decimal("107100")

    def test_tax_included_backs_out_tax(self, sample_item, tax_included):
        """Con impuesto incluido el total es la base y el impuesto va embebido"""
        line = calculate_line_total(sample_item, tax_included)

        assert line.line_total == Decimal("90000")
        assert line.line_subtotal == Decimal("84034")
        assert line.line_discount == Decimal("8404")
        assert line.line_tax == Decimal("14370")
        assert line.line_total == line.line_subtotal - line.line_discount + line.line_tax

    def test_tax_included_zero_rate_has_no_tax(self, tax_included):
        """Con tarifa 0 el redondeo del descuento no se convierte en impuesto"""
        line = calculate_line_total({"quantity": 1, "price": 5, "discount": 10, "tax": 0}, tax_included)

        assert line.line_tax == Decimal("0")
        assert line.line_total == Decimal("5")
        assert line.line_subtotal == Decimal("5")
        assert line.line_discount == Decimal("0")

    def test_tax_included_fractional_quantity_is_non_negative(self, tax_included):
        """Productos por peso: cantidad fraccionaria sin impuesto negativo"""
        line = calculate_line_total({"quantity": "0.5", "price": 3, "discount": 10, "tax": 0}, tax_included)

        assert line.line_tax == Decimal("0")
        assert line.line_total == Decimal("1")
        assert all(v >= 0 for v in (line.line_subtotal, line.line_discount, line.line_tax, line.line_total))
        assert line.line_total == line.line_subtotal - line.line_discount + line.line_tax

    @pytest.mark.parametrize("quantity,price,discount,tax", [
        ("0.5", 3, 10, 0),
        ("2.5", 1, 0, 100),
        ("0.25", 7, 50, 19),
        (1, 3, 50, 5),
        ("1.5", 1, 0, 50),
    ])
    def test_tax_included_rounding_stays_non_negative(self, quantity, price, discount, tax, tax_included):
        item = {"quantity": quantity, "price": price, "discount": discount, "tax": tax}
        line = calculate_line_total(item, tax_included)

        assert all(v >= 0 for v in (line.line_subtotal, line.line_discount, line.line_tax, line.line_total))
        assert line.line_total == line.line_subtotal - line.line_discount + line.line_tax

    def test_tax_included_negative_quantity_mirrors_positive(self, tax_included):
        positive = calculate_line_total({"quantity": "2.5", "price": 1, "tax": 100}, tax_included)
        negative = calculate_line_total({"quantity": "-2.5", "price": 1, "tax": 100}, tax_included)

        assert negative.line_subtotal == -positive.line_subtotal
        assert negative.line_discount == -positive.line_discount
        assert negative.line_tax == -positive.line_tax
        assert negative.line_total == -positive.line_total

    def test_tax_included_and_excluded_agree(self, tax_excluded, tax_included):
        """Precio P sin IVA equivale a P * 1.19 con IVA incluido"""
        excluded = calculate_line_total(
            {"quantity": 2, "price": 50000, "discount": 10, "tax": 19}, tax_excluded
        )
        included = calculate_line_total(
            {"quantity": 2, "price": add_percentage(50000, 19), "discount": 10, "tax": 19}, tax_included
        )

        assert abs(excluded.line_total - included.line_total) <= 1

    @pytest.mark.parametrize("quantity,price,discount,tax", [
        (1, 1999, 0, 19),
        (3, 3333, 7, 5),
        (7, 12345, 15, 19),
        (1, 99, 33, 8),
    ])
    def test_odd_values_keep_consistency(self, quantity, price, discount, tax, tax_excluded, tax_included):
        """Con valores impares la diferencia entre modos no supera un peso"""
        excluded = calculate_line_total(
            {"quantity": quantity, "price": price, "discount": discount, "tax": tax}, tax_excluded
        )
        included = calculate_line_total(
            {"quantity": quantity, "price": add_percentage(price, tax), "discount": discount, "tax": tax},
            tax_included
        )

        assert abs(excluded.line_total - included.line_total) <= 1
        for line in (excluded, included):
            assert line.line_total == line.line_subtotal - line.line_discount + line.line_tax

    def test_round_half_up(self, tax_excluded):
        """0.5 pesos se redondea hacia arriba"""
        line = calculate_line_total({"quantity": 1, "price": "10.5", "tax": 0}, tax_excluded)
        assert line.line_total == Decimal("11")

    def test_amount_discount_is_clamped(self):
        """Un descuento en valor nunca supera el valor de la línea"""
        config = CalculationConfig(tax_included=False, discount_mode=DiscountMode.AMOUNT)
        line = calculate_line_total({"quantity": 1, "price": 1000, "discount": 1500, "tax": 19}, config)

        assert line.line_discount == Decimal("1000")
        assert line.line_tax == Decimal("0")
        assert line.line_total == Decimal("0")

    def test_amount_discount(self):
        config = CalculationConfig(tax_included=False, discount_mode=DiscountMode.AMOUNT)
        line = calculate_line_total({"quantity": 2, "price": 50000, "discount": 10000, "tax": 19}, config)

        assert line.line_total == Decimal("107100")

    def test_non_negative_outputs(self, sample_item, tax_excluded, tax_included):
        for config in (tax_excluded, tax_included):
            line = calculate_line_total(sample_item, config)
            assert all(v >= 0 for v in (line.line_subtotal, line.line_discount, line.line_tax, line.line_total))

    def test_negative_quantity_propagates_sign(self, tax_excluded):
        """Las notas crédito envían cantidades negativas"""
        line = calculate_line_total({"quantity": -2, "price": 50000, "discount": 10, "tax": 19}, tax_excluded)

        assert line.line_subtotal == Decimal("-100000")
        assert line.line_discount == Decimal("-10000")
        assert line.line_tax == Decimal("-17100")
        assert line.line_total == Decimal("-107100")

    def test_accepts_schema_items(self, tax_excluded):
        item = LineItem(name="Camisa", quantity=Decimal("2"), price=Decimal("50000"),
                        discount=Decimal("10"), tax=Decimal("19"))
        assert calculate_line_total(item, tax_excluded).line_total == Decimal("107100")

    def test_missing_discount_and_tax_default_to_zero(self, tax_excluded):
        line = calculate_line_total({"quantity": 2, "price": 1500}, tax_excluded)
        assert line.line_total == Decimal("3000")


class TestNonFiniteInputs:
    """NaN e Infinity no lanzan excepción: se propagan"""

    def test_nan_price(self, tax_excluded):
        line = calculate_line_total({"quantity": 1, "price": float("nan"), "tax": 19}, tax_excluded)
        assert line.line_total.is_nan()
        assert line.line_subtotal.is_nan()

    def test_infinite_price(self, tax_excluded):
        line = calculate_line_total({"quantity": 1, "price": Decimal("Infinity"), "tax": 19}, tax_excluded)
        assert not line.line_total.is_finite()

    def test_non_numeric_quantity(self, tax_excluded):
        line = calculate_line_total({"quantity": "abc", "price": 1000}, tax_excluded)
        assert line.line_total.is_nan()

    def test_nan_reaches_aggregate(self, tax_excluded):
        totals = calculate_aggregate([
            {"quantity": 1, "price": 1000, "tax": 19},
            {"quantity": 1, "price": float("nan"), "tax": 19},
        ], tax_excluded)
        assert totals.total.is_nan()


# ===== TESTS DE TOTALES DEL DOCUMENTO =====

class TestAggregateTotals:
    """Tests para calculate_aggregate"""

    def test_empty_items_is_zero(self, tax_excluded, tax_included):
        for config in (tax_excluded, tax_included, CalculationConfig(retention=Decimal("2.5"))):
            assert calculate_aggregate([], config) == AggregateTotals()

    def test_reconciliation(self, sample_items, tax_excluded, tax_included):
        for config in (tax_excluded, tax_included, CalculationConfig(retention=Decimal("3.5"))):
            _assert_reconciles(calculate_aggregate(sample_items, config))

    def test_additivity(self, sample_items, tax_excluded, tax_included):
        """Sumar dos documentos equivale a sumar sus totales"""
        first, second = sample_items[:2], sample_items[2:]

        for config in (tax_excluded, tax_included):
            combined = calculate_aggregate(sample_items, config)
            a = calculate_aggregate(first, config)
            b = calculate_aggregate(second, config)

            assert combined.subtotal == a.subtotal + b.subtotal
            assert combined.total_discount == a.total_discount + b.total_discount
            assert combined.total_tax == a.total_tax + b.total_tax

    def test_retention_applied_once_on_subtotal(self):
        config = CalculationConfig(tax_included=False, retention=Decimal("2.5"))
        totals = calculate_aggregate([{"quantity": 1, "price": 100000, "tax": 19}], config)

        assert totals.subtotal == Decimal("100000")
        assert totals.total_tax == Decimal("19000")
        assert totals.total_retention == Decimal("2500")
        assert totals.total == Decimal("116500")

    def test_negated_quantities_negate_totals(self, sample_items):
        config = CalculationConfig(tax_included=False, retention=Decimal("2.5"))
        negated = [{**item, "quantity": -item["quantity"]} for item in sample_items]

        totals = calculate_aggregate(sample_items, config)
        reversed_totals = calculate_aggregate(negated, config)

        assert reversed_totals.subtotal == -totals.subtotal
        assert reversed_totals.total_discount == -totals.total_discount
        assert reversed_totals.total_tax == -totals.total_tax
        assert reversed_totals.total_retention == -totals.total_retention
        assert reversed_totals.total == -totals.total

    def test_refunds_are_tracked(self, tax_excluded):
        totals = calculate_aggregate([
            {"quantity": 2, "price": 50000, "discount": 10, "tax": 19},
            {"quantity": -1, "price": 10000, "tax": 19},
        ], tax_excluded)

        assert totals.total_refunds == Decimal("-11900")
        assert totals.total == Decimal("95200")

    def test_default_config_from_settings(self, sample_item):
        assert calculate_aggregate([sample_item]).total == Decimal("107100")


class TestTaxBreakdown:
    """Tests para calculate_tax_breakdown"""

    def test_grouped_by_rate(self, sample_items, tax_excluded):
        breakdown = calculate_tax_breakdown(sample_items, tax_excluded)

        assert [b.rate for b in breakdown] == [Decimal("0"), Decimal("5"), Decimal("19")]
        iva_19 = breakdown[-1]
        assert iva_19.taxable_base == Decimal("179990")
        assert iva_19.tax_amount == Decimal("17100") + Decimal("17098")

    def test_sum_matches_total_tax(self, sample_items, tax_excluded, tax_included):
        for config in (tax_excluded, tax_included):
            breakdown = calculate_tax_breakdown(sample_items, config)
            totals = calculate_aggregate(sample_items, config)
            assert sum(b.tax_amount for b in breakdown) == totals.total_tax

    def test_empty(self, tax_excluded):
        assert calculate_tax_breakdown([], tax_excluded) == []

    def test_zero_rate_with_tax_included(self, tax_included):
        items = [
            {"quantity": 1, "price": 5, "discount": 10, "tax": 0},
            {"quantity": "0.5", "price": 3, "discount": 10, "tax": 0},
        ]
        breakdown = calculate_tax_breakdown(items, tax_included)

        assert len(breakdown) == 1
        assert breakdown[0].rate == Decimal("0")
        assert breakdown[0].tax_amount == Decimal("0")
        assert breakdown[0].taxable_base == Decimal("6")


class TestPercentageHelpers:

    def test_add_and_remove_percentage(self):
        assert add_percentage(100, 19) == Decimal("119")
        assert remove_percentage(119, 19) == Decimal("100")

    def test_remove_zero_percentage(self):
        assert remove_percentage(5000, 0) == Decimal("5000")


# ===== TESTS DE POLÍTICAS POR DOCUMENTO =====

class TestDocumentPolicies:
    """Retención solo en compras, cantidades negativas solo en notas crédito"""

    def test_retention_ignored_for_sales(self):
        config = CalculationConfig(tax_included=False, retention=Decimal("2.5"))
        items = [{"quantity": 1, "price": 100000, "tax": 19}]

        invoice = calculate_document_totals(DocumentType.LEGAL_INVOICE, items, config)
        assert invoice.total_retention == Decimal("0")
        assert invoice.total == Decimal("119000")

    def test_retention_applied_for_purchases(self):
        config = CalculationConfig(tax_included=False, retention=Decimal("2.5"))
        items = [{"quantity": 1, "price": 100000, "tax": 19}]

        purchase = calculate_document_totals(DocumentType.PURCHASE_INVOICE, items, config)
        assert purchase.total_retention == Decimal("2500")
        assert purchase.total == Decimal("116500")

    def test_empty_document(self):
        assert validate_document_items(DocumentType.LEGAL_INVOICE, []) == [
            "No puedes crear una factura sin productos"
        ]

    def test_zero_and_negative_quantities(self):
        items = [
            LineItem(name="Camisa", quantity=Decimal("0"), price=Decimal("50000")),
            LineItem(name="Arroz", quantity=Decimal("-1"), price=Decimal("4333")),
            LineItem(name="Libro", quantity=Decimal("1"), price=Decimal("35000")),
        ]

        assert validate_document_items(DocumentType.LEGAL_INVOICE, items) == [
            "El producto Camisa no puede tener cantidad 0",
            "El producto Arroz no puede tener cantidad negativa",
        ]

    def test_credit_note_allows_negative_quantities(self):
        items = [LineItem(name="Camisa", quantity=Decimal("-2"), price=Decimal("50000"))]
        assert validate_document_items(DocumentType.CREDIT_NOTE, items) == []


# ===== TESTS DE API =====

class TestInvoiceMathAPI:
    """Tests de integración para endpoints"""

    def test_line_totals_endpoint(self):
        response = client.post("/invoice-math/line-totals", json={
            "item": {"quantity": 2, "price": 50000, "discount": 10, "tax": 19},
            "config": {"tax_included": False}
        })
        assert response.status_code == 200

        data = response.json()
        assert Decimal(data["line_tax"]) == Decimal("17100")
        assert Decimal(data["line_total"]) == Decimal("107100")

    def test_totals_endpoint_with_breakdown(self):
        response = client.post("/invoice-math/totals", json={
            "items": [
                {"quantity": 2, "price": 50000, "discount": 10, "tax": 19},
                {"quantity": 1, "price": 10000, "tax": 5},
            ],
            "config": {"tax_included": False, "retention": 2.5},
            "document_type": "purchase_invoice"
        })
        assert response.status_code == 200

        data = response.json()
        assert Decimal(data["subtotal"]) == Decimal("110000")
        assert Decimal(data["total_retention"]) == Decimal("2750")
        assert len(data["tax_breakdown"]) == 2
        assert Decimal(data["total"]) == (
            Decimal(data["subtotal"]) - Decimal(data["total_discount"])
            + Decimal(data["total_tax"]) - Decimal(data["total_retention"])
        )

    def test_totals_endpoint_rejects_zero_quantity(self):
        response = client.post("/invoice-math/totals", json={
            "items": [{"name": "Camisa", "quantity": 0, "price": 50000}],
            "document_type": "legal_invoice"
        })
        assert response.status_code == 422
        assert response.json()["detail"] == ["El producto Camisa no puede tener cantidad 0"]

    def test_invalid_retention(self):
        response = client.post("/invoice-math/totals", json={
            "items": [{"quantity": 1, "price": 1000}],
            "config": {"retention": 150}
        })
        assert response.status_code == 422

    def test_line_totals_rejects_percentage_discount_over_100(self):
        response = client.post("/invoice-math/line-totals", json={
            "item": {"quantity": 1, "price": 1000, "discount": 150, "tax": 19},
            "config": {"tax_included": False}
        })
        assert response.status_code == 422

    def test_totals_rejects_percentage_discount_over_100(self):
        response = client.post("/invoice-math/totals", json={
            "items": [
                {"quantity": 1, "price": 1000, "discount": 10, "tax": 19},
                {"quantity": 1, "price": 1000, "discount": "100.5", "tax": 19},
            ],
            "config": {"tax_included": False}
        })
        assert response.status_code == 422

    def test_amount_discount_over_100_is_allowed(self):
        """En modo valor el descuento son pesos, no porcentaje"""
        response = client.post("/invoice-math/line-totals", json={
            "item": {"quantity": 1, "price": 2000, "discount": 1500, "tax": 0},
            "config": {"tax_included": False, "discount_mode": "amount"}
        })
        assert response.status_code == 200
        assert Decimal(response.json()["line_total"]) == Decimal("500")

    def test_totals_ignores_retention_for_sales_document(self):
        response = client.post("/invoice-math/totals", json={
            "items": [{"name": "Camisa", "quantity": 1, "price": 100000, "tax": 19}],
            "config": {"tax_included": False, "retention": 2.5},
            "document_type": "legal_invoice"
        })
        assert response.status_code == 200

        data = response.json()
        assert Decimal(data["total_retention"]) == Decimal("0")
        assert Decimal(data["total"]) == Decimal("119000")
        assert Decimal(data["tax_breakdown"][0]["tax_amount"]) == Decimal("19000")

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

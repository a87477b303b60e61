from pydantic import BaseModel, ConfigDict, Field, model_validator
from decimal import Decimal
from typing import Optional, List
from enum import Enum

from villing.core.config import settings


class DiscountMode(str, Enum):
    PERCENTAGE = "percentage"  # Porcentaje 0-100 sobre el valor de la línea
    AMOUNT = "amount"  # Valor absoluto en pesos


class DocumentType(str, Enum):
    LEGAL_POS_INVOICE = "legal_pos_invoice"  # Factura POS
    LEGAL_INVOICE = "legal_invoice"  # Factura electrónica
    LEGAL_INVOICE_REMISION = "legal_invoice_remision"  # Remisión
    QUOTE = "quote"  # Cotización
    PURCHASE = "purchase"  # Orden de compra
    PURCHASE_REMISION = "purchase_remision"  # Remisión de compra
    PURCHASE_INVOICE = "purchase_invoice"  # Factura de compra
    CREDIT_NOTE = "credit_note"  # Nota crédito
    DEBIT_NOTE = "debit_note"  # Nota débito
    STOCK_SETTING = "stock_setting"  # Ajuste de inventario
    ORDER = "order"  # Pedido


class CalculationConfig(BaseModel):
    """Configuración del motor de cálculo"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    tax_included: bool = Field(
        default_factory=lambda: settings.DEFAULT_TAX_INCLUDED,
        description="El precio ya incluye el impuesto"
    )
    retention: Decimal = Field(
        default_factory=lambda: settings.DEFAULT_RETENTION,
        ge=0, le=100,
        description="Porcentaje de retención sobre el subtotal del documento"
    )
    discount_mode: DiscountMode = Field(DiscountMode.PERCENTAGE, description="Cómo interpretar el descuento")


class LineItem(BaseModel):
    """Línea de producto de un documento"""
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = Field(None, max_length=255)
    quantity: Decimal = Field(..., description="Cantidad (negativa en devoluciones)")
    price: Decimal = Field(..., description="Precio unitario en pesos")
    discount: Decimal = Field(Decimal('0'), ge=0, description="Descuento (porcentaje o valor según configuración)")
    tax: Decimal = Field(Decimal('0'), ge=0, description="Tarifa del impuesto (ej. 19 para IVA 19%)")


def _check_percentage_discounts(items: List[LineItem], config: CalculationConfig):
    if config.discount_mode != DiscountMode.PERCENTAGE:
        return
    for item in items:
        if item.discount > 100:
            raise ValueError(f"El descuento no puede ser mayor al 100% (recibido {item.discount})")


class LineTotalsRequest(BaseModel):
    item: LineItem
    config: CalculationConfig = Field(default_factory=CalculationConfig)

    @model_validator(mode='after')
    def validate_discount(self):
        _check_percentage_discounts([self.item], self.config)
        return self


class TotalsRequest(BaseModel):
    items: List[LineItem]
    config: CalculationConfig = Field(default_factory=CalculationConfig)
    document_type: Optional[DocumentType] = None

    @model_validator(mode='after')
    def validate_discounts(self):
        _check_percentage_discounts(self.items, self.config)
        return self


class LineTotalsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    line_subtotal: Decimal
    line_discount: Decimal
    line_tax: Decimal
    line_total: Decimal


class TaxBreakdownOut(BaseModel):
    """Impuestos agrupados por tarifa"""
    model_config = ConfigDict(from_attributes=True)

    rate: Decimal
    taxable_base: Decimal
    tax_amount: Decimal


class AggregateTotalsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subtotal: Decimal
    total_discount: Decimal
    total_tax: Decimal
    total_retention: Decimal
    total: Decimal
    total_refunds: Decimal
    tax_breakdown: List[TaxBreakdownOut] = []

"""
Módulo de Nómina Electrónica - Villing

Convierte los conceptos de nómina de un empleado (ingresos y deducciones) en
el documento que recibe el proveedor de nómina electrónica ante la DIAN.

Componentes:
- concepts.py: Catálogo de etiquetas de ingresos y deducciones
- definitions.py: Forma de cálculo de cada concepto y conceptos por defecto
- lookups.py: Búsqueda de conceptos (ingresos tolerantes, deducciones únicas)
- mapper.py: Mapeo de ingresos, deducciones y totales
- validation.py: Validación de conceptos antes de guardar
- exceptions.py: Errores de integridad de datos
- router.py: Endpoints REST API
- tests.py: Pruebas unitarias y de API
"""

from .concepts import ConceptType, DeductionConcept, IncomeConcept
from .exceptions import DuplicateDeductionError, MissingSalaryError, PayrollDataIntegrityError
from .mapper import build_payroll_summary, calculate_concepts_totals, map_deductions, map_incomes
from .schemas import DeductionOutput, IncomeOutput, PayrollConcept
from .validation import validate_concepts

__all__ = [
    "ConceptType",
    "DeductionConcept",
    "IncomeConcept",
    "DuplicateDeductionError",
    "MissingSalaryError",
    "PayrollDataIntegrityError",
    "build_payroll_summary",
    "calculate_concepts_totals",
    "map_deductions",
    "map_incomes",
    "DeductionOutput",
    "IncomeOutput",
    "PayrollConcept",
    "validate_concepts"
]

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from villing.modules.payroll.definitions import (
    DEFINITIONS, ConceptDefinition, base_salary_from_portion_by_days_worked,
    get_default_deductions, get_default_incomes, has_transport_aid_right
)
from villing.modules.payroll.exceptions import PayrollDataIntegrityError
from villing.modules.payroll.mapper import build_payroll_summary
from villing.modules.payroll.schemas import (
    ConceptValidation, ConceptValidationRequest, DefaultConcepts,
    DefaultConceptsRequest, PayrollMappingRequest
)
from villing.modules.payroll.validation import validate_concepts

logger = logging.getLogger(__name__)

payroll_router = APIRouter(prefix="/payroll", tags=["Payroll"])


@payroll_router.get("/concepts", response_model=List[ConceptDefinition])
def list_concept_definitions():
    """
    Listar el catálogo de conceptos de nómina

    Ingresos y deducciones con su forma de cálculo, porcentaje y si son
    obligatorios.
    """
    return DEFINITIONS


@payroll_router.post("/concepts/defaults", response_model=DefaultConcepts)
def get_default_concepts(request: DefaultConceptsRequest):
    """
    Conceptos por defecto de un empleado en el periodo
    """
    base_salary = request.base_salary
    if base_salary is None:
        base_salary = base_salary_from_portion_by_days_worked(request.salary, request.worked_days)

    has_transport_aid = request.has_transport_aid
    if has_transport_aid is None:
        has_transport_aid = has_transport_aid_right(base_salary)

    return DefaultConcepts(
        incomes=get_default_incomes(
            request.salary, request.worked_days, base_salary, has_transport_aid
        ),
        deductions=get_default_deductions(request.salary)
    )


@payroll_router.post("/concepts/validate", response_model=ConceptValidation)
def validate_payroll_concepts(request: ConceptValidationRequest):
    """
    Validar los conceptos de un empleado antes de guardar la nómina

    Los errores se devuelven en la respuesta (no como error HTTP) para
    mostrarlos en el formulario.
    """
    return validate_concepts(request.concepts)


@payroll_router.post("/electronic-payroll")
def map_electronic_payroll(request: PayrollMappingRequest):
    """
    Armar los ingresos, deducciones y totales del documento de nómina electrónica

    Los campos que no aplican en el periodo se omiten. Un salario faltante o
    una deducción repetida devuelven 422 con el mensaje del error.
    """
    try:
        summary = build_payroll_summary(request.concepts, request.worked_days)
    except PayrollDataIntegrityError as e:
        logger.warning(f"Electronic payroll rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    return summary.to_payload()

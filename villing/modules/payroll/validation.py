"""
Validación de los conceptos de nómina de un empleado

Se ejecuta antes de guardar o enviar la nómina. Devuelve los errores como
mensajes para el usuario en lugar de lanzar excepciones.
"""

import logging
from typing import Iterable

from pydantic import ValidationError

from villing.common.numbers import ZERO, normalize_text
from villing.modules.payroll.concepts import IncomeConcept, resolve_concept_type
from villing.modules.payroll.definitions import MANDATORY_DEFINITIONS
from villing.modules.payroll.lookups import IncomeLookup, coerce_concepts
from villing.modules.payroll.schemas import ConceptValidation

logger = logging.getLogger(__name__)


def _concept_key(concept):
    return resolve_concept_type(concept.key_name, concept.type), normalize_text(concept.key_name)


def validate_concepts(concepts: Iterable) -> ConceptValidation:
    """
    Validar la lista de conceptos de un empleado

    Reglas, en orden (la primera que falla detiene la validación):
    1. Todos los conceptos obligatorios están presentes (se reportan todos los faltantes)
    2. Los días de vacaciones regulares son un número entero
    3. No hay conceptos repetidos

    Returns:
        ConceptValidation con los errores; si hay errores, concepts viene vacío
    """
    try:
        concepts = coerce_concepts(concepts)
    except ValidationError as e:
        logger.warning(f"Invalid payroll concepts payload: {e.error_count()} errors")
        return ConceptValidation(
            errors=[err["msg"] for err in e.errors()],
            concepts=[],
            salary=ZERO
        )

    keys = [_concept_key(c) for c in concepts]

    missing = [
        f'El concepto "{d.key_name.value.lower()}" es obligatorio'
        for d in MANDATORY_DEFINITIONS
        if (d.type, normalize_text(d.key_name.value)) not in keys
    ]
    if missing:
        return ConceptValidation(errors=missing, concepts=[], salary=ZERO)

    incomes = IncomeLookup(concepts)

    vacation_days = incomes.quantity(IncomeConcept.VACATION)
    if vacation_days is not None and vacation_days != vacation_days.to_integral_value():
        return ConceptValidation(
            errors=["Las vacaciones deben ser un número entero"],
            concepts=[],
            salary=ZERO
        )

    if len(set(keys)) != len(keys):
        return ConceptValidation(
            errors=["No pueden haber conceptos repetidos"],
            concepts=[],
            salary=ZERO
        )

    return ConceptValidation(
        errors=[],
        concepts=concepts,
        salary=incomes.amount(IncomeConcept.SALARY) or ZERO
    )

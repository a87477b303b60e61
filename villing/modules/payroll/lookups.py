"""
Búsqueda de conceptos por catálogo

Dos políticas distintas:
- IncomeLookup: los ingresos pueden repetirse, gana el primero
- DeductionLookup: una deducción repetida es un error
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, List, Optional

from villing.modules.payroll.concepts import (
    ConceptType, DeductionConcept, IncomeConcept, resolve_concept_type
)
from villing.modules.payroll.exceptions import DuplicateDeductionError
from villing.modules.payroll.schemas import PayrollConcept

logger = logging.getLogger(__name__)


def coerce_concepts(concepts: Iterable) -> List[PayrollConcept]:
    """Aceptar esquemas, diccionarios u objetos ORM"""
    return [
        c if isinstance(c, PayrollConcept) else PayrollConcept.model_validate(c)
        for c in concepts
    ]


class _ConceptIndex:
    catalog = None
    concept_type: ConceptType = None

    def __init__(self, concepts: Iterable):
        self._index = defaultdict(list)

        for concept in coerce_concepts(concepts):
            if concept.type is not None and concept.type != self.concept_type:
                continue

            key = self.catalog.resolve(concept.key_name)
            if key is None:
                if resolve_concept_type(concept.key_name) is None:
                    logger.warning(f"Ignoring unknown payroll concept '{concept.key_name}'")
                continue

            self._index[key].append(concept)

    def get(self, key) -> Optional[PayrollConcept]:
        raise NotImplementedError

    def amount(self, key) -> Optional[Decimal]:
        concept = self.get(key)
        return concept.amount if concept else None

    def quantity(self, key) -> Optional[Decimal]:
        concept = self.get(key)
        return concept.quantity if concept else None


class IncomeLookup(_ConceptIndex):
    catalog = IncomeConcept
    concept_type = ConceptType.INCOME

    def get(self, key: IncomeConcept) -> Optional[PayrollConcept]:
        matches = self._index.get(key)
        return matches[0] if matches else None


class DeductionLookup(_ConceptIndex):
    catalog = DeductionConcept
    concept_type = ConceptType.DEDUCTION

    def get(self, key: DeductionConcept) -> Optional[PayrollConcept]:
        matches = self._index.get(key, [])
        if len(matches) > 1:
            raise DuplicateDeductionError(key.value)
        return matches[0] if matches else None

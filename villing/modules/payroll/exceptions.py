class PayrollDataIntegrityError(ValueError):
    """Conceptos de nómina inconsistentes: detienen el envío antes de llamar al proveedor"""


class MissingSalaryError(PayrollDataIntegrityError):
    def __init__(self):
        super().__init__("El salario no puede ser nulo")


class DuplicateDeductionError(PayrollDataIntegrityError):
    def __init__(self, concept: str):
        self.concept = concept
        super().__init__(f"Solo puede haber 1 {concept}")

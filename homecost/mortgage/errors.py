"""Exceptions raised by the mortgage calculation package."""


class MortgageError(Exception):
    """Base class for calculation failures."""


class InvalidInputError(MortgageError):
    """
    Input that cannot produce a breakdown (non-positive price, malformed number,
    down payment covering the whole price).

    Attributes:
        field: Name of the offending input, for field-level validation messages
    """

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class EstimationUnavailableError(MortgageError):
    """The remote cost estimator failed and fallback is disabled. Retryable."""

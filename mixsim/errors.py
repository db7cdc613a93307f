class MixSimError(Exception):
    """Base class for errors raised by mixsim."""


class NumericalDomainError(MixSimError, ArithmeticError):
    """A model evaluation left its physical domain.

    Raised for negative ionic strength, non-finite species fluxes, a failed
    integration or a non-positive mixing time. Fatal to one forward
    simulation only; the estimator scores it as +inf.
    """

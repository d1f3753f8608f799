class PensionError(Exception):
    """Base class for errors raised by the pension projection engine."""

    kind: str = "PensionError"


class PensionValidationError(PensionError, ValueError):
    """A request violated one of the scheme rules and was not computed."""

    kind = "ValidationError"


class BelowMinimumContributionError(PensionValidationError):
    kind = "BelowMinimumContribution"


class AgeOutOfRangeError(PensionValidationError):
    kind = "AgeOutOfRange"


class InvalidAgeOrderError(PensionValidationError):
    kind = "InvalidAgeOrder"


class UnknownRiskProfileError(PensionValidationError):
    kind = "UnknownRiskProfile"


class InvalidTargetCorpusError(PensionValidationError):
    kind = "InvalidTargetCorpus"


class ComputationError(PensionError, ArithmeticError):
    """A computation produced NaN, infinity or a non-positive growth factor.

    Validation is expected to rule this out, so seeing it means an internal
    invariant was broken.
    """

    kind = "ComputationError"

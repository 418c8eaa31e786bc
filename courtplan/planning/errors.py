"""Domain-specific errors for practice plans.

Data-shape problems in user-entered plans or logged entries are reported
as structured validation results, never raised. The errors below cover
contract violations and callers that explicitly ask for an exception.
"""


class PracticePlanError(Exception):
    """Base exception for all practice-plan errors."""

    pass


class UnknownCategoryError(PracticePlanError):
    """Raised when a Type, Area or Exercise name is outside the category schema."""

    pass


class PlanDocumentError(PracticePlanError):
    """Raised when a stored plan document cannot be read into a plan."""

    pass


class PlanInvariantError(PracticePlanError):
    """Raised when a plan cannot be used to generate recommendations.

    Attributes:
        code: Error code (e.g., "NO_PLAN", "PLAN_NOT_COMPLETE")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")

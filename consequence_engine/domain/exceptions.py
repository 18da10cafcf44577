"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidScenarioError(DomainException):
    """Scenario parameters are malformed (non-numeric or non-finite values)"""

    pass


class InvalidAccountError(DomainException):
    """Account snapshot is malformed or carries impossible values"""

    pass


class AccountStoreError(DomainException):
    """Account store returned an error or is unavailable"""

    pass

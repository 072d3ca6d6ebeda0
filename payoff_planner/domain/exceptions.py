"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Debt set input is malformed (negative or non-numeric amounts, duplicate ids)"""

    pass


class AdvisoryUnavailable(DomainException):
    """Text-generation service failed, timed out or returned an unusable payload"""

    pass

class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class InvalidRangeError(ValidationError):
    """A lower bound exceeds its upper bound, or a percentage leaves [0, 100]."""


class DivisionByZeroError(ValidationError):
    pass


class NegativeQuantityError(ValidationError):
    pass


class DuplicateLineItemError(ValidationError):
    pass


class NotFoundError(AppError):
    pass


class InsufficientStockError(AppError):
    pass


class InvalidTransitionError(AppError):
    pass

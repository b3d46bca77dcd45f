# error taxonomy raised by the state engine


class EngineError(Exception):
    """Base class for every error raised by the engine."""


class ValidationError(EngineError):
    """
    Malformed or out-of-range input to a mutating operation.
    The operation had no effect; correct the input and retry.
    """


class StockConflictError(EngineError):
    """
    A checkout would drive a product's stock below zero.
    The whole transaction was rejected.
    """

    def __init__(self, message: str, product_ids=()):
        super().__init__(message)
        self.product_ids = tuple(product_ids)


class NotFoundError(EngineError):
    """An operation referenced an id absent from its collection."""

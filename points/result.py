from typing import Generic, Optional, TypeVar

from .errors import ERRORS_BY_KIND, LedgerError

T = TypeVar("T")


class Result(Generic[T]):
    """Outcome of a ledger operation: either a value or a LedgerError."""

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[LedgerError] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        if self.error is not None:
            raise ERRORS_BY_KIND[self.error.kind](self.error.message)
        return self.value

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Result(ok={self.value!r})"
        return f"Result(err={self.error!r})"


class Return:
    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: LedgerError) -> Result:
        return Result(error=error)

"""
Result model - success value or typed error, never both.
"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, model_validator

from ..errors import OperationError


T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Outcome of a core operation."""
    value: Optional[T] = None
    error: Optional[OperationError] = None

    @model_validator(mode="after")
    def value_xor_error(self) -> "Result[T]":
        if self.error is not None and self.value is not None:
            raise ValueError("a Result cannot carry both a value and an error")
        return self

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: OperationError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise ``ValueError`` describing the error."""
        if self.error is not None:
            raise ValueError(f"{self.error.code.value}: {self.error.message}")
        return self.value

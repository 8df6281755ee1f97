"""
Result Pattern Implementation
Type-safe error handling for provider and service calls
"""

from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar('T')


class Result(BaseModel, Generic[T]):
    """Result type for type-safe error handling"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> 'Result[T]':
        """Create a successful result"""
        return cls(success=True, data=data)

    @classmethod
    def err(cls, error: str) -> 'Result[T]':
        """Create an error result"""
        return cls(success=False, error=error)

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success

    def unwrap(self) -> T:
        """Unwrap successful result or raise on error"""
        if self.success and self.data is not None:
            return self.data
        raise ValueError(f"Result unwrap failed: {self.error}")

    def unwrap_or(self, default: T) -> T:
        if self.success and self.data is not None:
            return self.data
        return default

    def map(self, func: Callable[[T], Any]) -> 'Result':
        """Map successful result through a function"""
        if self.success and self.data is not None:
            try:
                return Result.ok(func(self.data))
            except Exception as e:
                return Result.err(str(e))
        return self

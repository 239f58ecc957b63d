from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

T = TypeVar('T')
T_co = TypeVar('T_co', covariant=True)


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a single remote lookup: a value, or the error that prevented it."""

    value: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: T) -> 'FetchResult[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> 'FetchResult[T]':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]


class DataSource(Protocol[T_co]):
    name: str

    async def fetch(self, address: str) -> 'FetchResult[T_co]': ...

"""Result types for railway-oriented validation.

Option checks return a Result instead of raising, so the validator can run
every check, keep each Failure, and raise once with the full list.

Usage:
    result = validate_not_empty(configuration.mount_point, "configuration.mount_point")
    match result:
        case Success(value=mount_point):
            ...
        case Failure(error=violation):
            violations.append(violation)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """A check that passed.

    Attributes:
        value: The checked value, unchanged.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """A check that failed.

    Attributes:
        error: The violation (a ValidationError for option checks).
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]

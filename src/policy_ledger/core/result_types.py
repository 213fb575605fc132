# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Result types for contract operations.

Business failures travel as ``Err(ContractError)`` values from the services
to the gateway and the HTTP layer; only substrate and programming errors are
raised.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar

from attrs import frozen
from beartype import beartype

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@frozen
class Ok(Generic[T]):
    """Successful outcome carrying the operation's value."""

    value: T

    @beartype
    def is_ok(self) -> bool:
        return True

    @beartype
    def is_err(self) -> bool:
        return False

    @beartype
    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    @beartype
    def unwrap_or(self, default: T) -> T:
        return self.value

    @beartype
    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok value: {self.value!r}")

    @beartype
    def map(self, func: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value, e.g. a record into its wire text."""
        return Ok(func(self.value))

    @beartype
    def and_then(self, func: Callable[[T], Any]) -> Any:
        """Chain a step that can itself fail."""
        return func(self.value)


@frozen
class Err(Generic[E]):
    """Failed outcome carrying the error value."""

    error: E

    @beartype
    def is_ok(self) -> bool:
        return False

    @beartype
    def is_err(self) -> bool:
        return True

    @beartype
    def unwrap(self) -> NoReturn:
        """Raise ValueError as this is Err."""
        raise ValueError(f"Called unwrap on Err value: {self.error}")

    @beartype
    def unwrap_or(self, default: T) -> T:
        return default

    @beartype
    def unwrap_err(self) -> E:
        """Get the error value."""
        return self.error

    @beartype
    def map(self, func: Callable[[Any], Any]) -> "Err[E]":
        return self

    @beartype
    def and_then(self, func: Callable[[Any], Any]) -> "Err[E]":
        return self


if TYPE_CHECKING:
    Result = Ok[T] | Err[E]
else:

    class Result(Generic[T, E]):
        """Runtime stand-in so ``Result[T, E]`` works in annotations beartype reads."""

        def __class_getitem__(cls, params: Any) -> Any:
            return Ok[Any] | Err[Any]

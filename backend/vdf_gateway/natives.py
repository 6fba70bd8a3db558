"""
Native-function adapter for a stack-based host VM.

The host hands each native a list of type arguments and a deque of argument
values in declaration order; natives pop from the right, so the last
declared argument is consumed first. Natives report a cost (always zero
here) and either return values or an abort code.
"""

from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from vdf_gateway.errors import NativeArgumentError, ResourceLimitExceeded
from vdf_gateway.limits import U64_MAX
from vdf_gateway.services.address_service import extract_address_from_challenge
from vdf_gateway.services.vdf_service import verify

NativeFunction = Callable[[list, deque], "NativeResult"]


class StatusCode(IntEnum):
    EXCEEDED_MAX_TRANSACTION_SIZE = 10


@dataclass(frozen=True)
class NativeResult:
    cost: int
    return_values: list[Any] = field(default_factory=list)
    abort_code: int | None = None

    @classmethod
    def ok(cls, cost: int, return_values: list[Any]) -> "NativeResult":
        return cls(cost=cost, return_values=return_values)

    @classmethod
    def err(cls, cost: int, abort_code: int) -> "NativeResult":
        return cls(cost=cost, abort_code=int(abort_code))

    @property
    def is_ok(self) -> bool:
        return self.abort_code is None


def pop_arg(args: deque, kind: type) -> Any:
    """Pop the rightmost argument and check it against `kind` (bytes, bool or int as u64)."""
    if not args:
        raise NativeArgumentError("Argument stack is empty")
    value = args.pop()

    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise NativeArgumentError(f"Expected u64, got {type(value).__name__}")
        if not 0 <= value <= U64_MAX:
            raise NativeArgumentError(f"Value {value} is out of range for u64")
        return value
    if kind is bytes:
        if not isinstance(value, (bytes, bytearray)):
            raise NativeArgumentError(f"Expected vector<u8>, got {type(value).__name__}")
        return bytes(value)
    if not isinstance(value, kind):
        raise NativeArgumentError(f"Expected {kind.__name__}, got {type(value).__name__}")
    return value


def _check_arity(ty_args: list, args: deque, expected: int) -> None:
    if ty_args:
        raise NativeArgumentError("Native takes no type arguments")
    if len(args) != expected:
        raise NativeArgumentError(f"Expected {expected} arguments, got {len(args)}")


def native_verify(ty_args: list, args: deque) -> NativeResult:
    _check_arity(ty_args, args, 5)

    use_wesolowski = pop_arg(args, bool)  # Pietrzak when false
    security = pop_arg(args, int)
    difficulty = pop_arg(args, int)
    solution = pop_arg(args, bytes)
    challenge = pop_arg(args, bytes)

    try:
        valid = verify(challenge, solution, difficulty, security, use_wesolowski)
    except ResourceLimitExceeded:
        return NativeResult.err(0, StatusCode.EXCEEDED_MAX_TRANSACTION_SIZE)

    return NativeResult.ok(0, [valid])


def native_extract_address_from_challenge(ty_args: list, args: deque) -> NativeResult:
    _check_arity(ty_args, args, 1)

    challenge = pop_arg(args, bytes)
    address, key_fragment = extract_address_from_challenge(challenge)
    return NativeResult.ok(0, [address, key_fragment])


def make_all(module_name: str = "vdf") -> Iterator[tuple[str, NativeFunction]]:
    """Native function table, keyed by module-qualified name."""
    natives = [
        ("verify", native_verify),
        ("extract_address_from_challenge", native_extract_address_from_challenge),
    ]
    for name, func in natives:
        yield f"{module_name}::{name}", func

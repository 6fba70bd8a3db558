from enum import Enum
from typing import Protocol

from vdf_gateway.vdf.pietrzak import PietrzakVDF
from vdf_gateway.vdf.wesolowski import WesolowskiVDF


class VDF(Protocol):
    """A VDF construction bound to one security level."""

    def check_difficulty(self, difficulty: int) -> None: ...

    def solve(self, challenge: bytes, difficulty: int) -> bytes: ...

    def verify(self, challenge: bytes, difficulty: int, alleged_solution: bytes) -> None: ...


class VDFScheme(str, Enum):
    WESOLOWSKI = "wesolowski"
    PIETRZAK = "pietrzak"

    @classmethod
    def from_flag(cls, use_wesolowski: bool) -> "VDFScheme":
        return cls.WESOLOWSKI if use_wesolowski else cls.PIETRZAK


def new_vdf(scheme: VDFScheme, security: int) -> VDF:
    """Construct the scheme for a 16-bit security (discriminant size) parameter."""
    if scheme is VDFScheme.WESOLOWSKI:
        return WesolowskiVDF(security)
    return PietrzakVDF(security)


__all__ = [
    "PietrzakVDF",
    "VDF",
    "VDFScheme",
    "WesolowskiVDF",
    "new_vdf",
]

from dataclasses import dataclass

AUTHENTICATION_KEY_LENGTH = 32


@dataclass(frozen=True, slots=True)
class AccountAddress:
    """Fixed-width account identifier."""

    LENGTH = 32

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != self.LENGTH:
            raise ValueError(f"AccountAddress must be {self.LENGTH} bytes, got {len(self.value)}")

    @classmethod
    def from_hex(cls, literal: str) -> "AccountAddress":
        literal = literal.removeprefix("0x")
        return cls(bytes.fromhex(literal.rjust(cls.LENGTH * 2, "0")))

    def to_hex(self) -> str:
        return self.value.hex()

    def to_hex_literal(self) -> str:
        return f"0x{self.to_hex()}"

    def __str__(self) -> str:
        return self.to_hex_literal()

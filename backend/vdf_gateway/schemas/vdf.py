import re

from pydantic import BaseModel, Field, field_validator

from vdf_gateway.config import settings
from vdf_gateway.limits import U64_MAX

_HEX_RE = re.compile(r"(0x)?([0-9a-fA-F]{2})*")


def strict_hex_decode(value: str, field_name: str) -> bytes:
    """
    Strictly validate and decode a hex string.

    Accepts an optional 0x prefix. Rejects odd lengths, whitespace and
    non-hex characters.
    """
    if not _HEX_RE.fullmatch(value):
        raise ValueError(f"{field_name}: Invalid hex encoding")
    decoded = bytes.fromhex(value.removeprefix("0x"))
    if len(decoded) > settings.max_request_bytes:
        raise ValueError(f"{field_name}: exceeds {settings.max_request_bytes} bytes")
    return decoded


class VerifyRequest(BaseModel):
    challenge: bytes = Field(..., description="Hex encoded challenge")
    solution: bytes = Field(..., description="Hex encoded VDF proof")
    difficulty: int = Field(..., ge=0, le=U64_MAX)
    security: int = Field(..., ge=0, le=U64_MAX)
    use_wesolowski: bool = Field(..., description="Wesolowski if true, Pietrzak if false")

    @field_validator("challenge", "solution", mode="before")
    @classmethod
    def decode_hex(cls, v, info):
        if not isinstance(v, str):
            raise ValueError(f"{info.field_name}: must be a hex string")
        return strict_hex_decode(v, info.field_name)


class VerifyResponse(BaseModel):
    valid: bool

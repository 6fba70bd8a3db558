from pydantic import BaseModel, Field, field_validator

from vdf_gateway.schemas.vdf import strict_hex_decode


class AddressRequest(BaseModel):
    challenge: bytes = Field(..., description="Hex encoded challenge, at least 32 bytes")

    @field_validator("challenge", mode="before")
    @classmethod
    def decode_challenge(cls, v):
        if not isinstance(v, str):
            raise ValueError("challenge: must be a hex string")
        return strict_hex_decode(v, "challenge")


class AddressResponse(BaseModel):
    address: str = Field(..., description="0x-prefixed account address")
    key_fragment: str = Field(..., description="Hex encoded first 16 bytes of the auth key")

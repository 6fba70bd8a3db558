from vdf_gateway.schemas.challenge import AddressRequest, AddressResponse
from vdf_gateway.schemas.vdf import VerifyRequest, VerifyResponse

__all__ = [
    "AddressRequest",
    "AddressResponse",
    "VerifyRequest",
    "VerifyResponse",
]

import structlog
from fastapi import APIRouter, HTTPException, Request

from vdf_gateway.config import settings
from vdf_gateway.errors import ChallengeTooShort
from vdf_gateway.middleware.rate_limit import limiter
from vdf_gateway.schemas.challenge import AddressRequest, AddressResponse
from vdf_gateway.services.address_service import extract_address_from_challenge

router = APIRouter()
logger = structlog.get_logger()


@router.post("/challenges/address", response_model=AddressResponse)
@limiter.limit(settings.rate_limit_extract)
async def extract_address(request: Request, address_data: AddressRequest):
    """Derive the account address and key fragment encoded in a challenge."""
    try:
        address, key_fragment = extract_address_from_challenge(address_data.challenge)
    except ChallengeTooShort as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("address_extracted", challenge_length=len(address_data.challenge))

    return AddressResponse(
        address=address.to_hex_literal(),
        key_fragment=key_fragment.hex(),
    )

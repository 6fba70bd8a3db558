from fastapi import APIRouter, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from vdf_gateway.config import settings
from vdf_gateway.errors import ResourceLimitExceeded
from vdf_gateway.middleware.rate_limit import limiter
from vdf_gateway.schemas.vdf import VerifyRequest, VerifyResponse
from vdf_gateway.services.vdf_service import verify

router = APIRouter()


@router.post("/vdf/verify", response_model=VerifyResponse)
@limiter.limit(settings.rate_limit_verify)
async def verify_solution(request: Request, verify_data: VerifyRequest):
    """
    Verify a VDF solution.

    Returns 200 with `valid` for every proof the scheme could evaluate, and
    413 when security or difficulty exceed the hard ceilings.
    """
    try:
        # Group arithmetic is CPU bound; keep it off the event loop
        valid = await run_in_threadpool(
            verify,
            verify_data.challenge,
            verify_data.solution,
            verify_data.difficulty,
            verify_data.security,
            verify_data.use_wesolowski,
        )
    except ResourceLimitExceeded as e:
        raise HTTPException(status_code=413, detail=str(e))

    return VerifyResponse(valid=valid)

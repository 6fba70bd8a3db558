import structlog

from vdf_gateway.errors import InvalidProof, ResourceLimitExceeded
from vdf_gateway.limits import (
    MAX_DIFFICULTY,
    MAX_PIETRZAK_DIFFICULTY,
    MAX_SECURITY,
    MAX_WESOLOWSKI_DIFFICULTY,
    narrow_security,
)
from vdf_gateway.vdf import VDFScheme, new_vdf

logger = structlog.get_logger()


def check_limits(difficulty: int, security: int, use_wesolowski: bool) -> None:
    """
    Reject oversized parameters before any group arithmetic.

    Raises ResourceLimitExceeded. Bounds are inclusive: a value equal to its
    ceiling is allowed through.
    """
    if security > MAX_SECURITY:
        raise ResourceLimitExceeded("security", security, MAX_SECURITY)
    if difficulty > MAX_DIFFICULTY:
        raise ResourceLimitExceeded("difficulty", difficulty, MAX_DIFFICULTY)

    if use_wesolowski:
        # Same ceiling as the global one today; kept as its own guard so the
        # two can diverge.
        if difficulty > MAX_WESOLOWSKI_DIFFICULTY:
            raise ResourceLimitExceeded("difficulty", difficulty, MAX_WESOLOWSKI_DIFFICULTY)
    elif difficulty > MAX_PIETRZAK_DIFFICULTY:
        raise ResourceLimitExceeded("difficulty", difficulty, MAX_PIETRZAK_DIFFICULTY)


def verify(
    challenge: bytes,
    solution: bytes,
    difficulty: int,
    security: int,
    use_wesolowski: bool,
) -> bool:
    """
    Verify a VDF solution against a challenge.

    Returns True if the scheme accepts the proof and False for any
    verification failure. Raises ResourceLimitExceeded for parameters above
    the hard ceilings.
    """
    scheme = VDFScheme.from_flag(use_wesolowski)
    try:
        check_limits(difficulty, security, use_wesolowski)
        vdf = new_vdf(scheme, narrow_security(security))
    except ResourceLimitExceeded as e:
        logger.warning(
            "vdf_limit_exceeded",
            scheme=scheme.value,
            parameter=e.parameter,
            value=e.value,
            limit=e.limit,
        )
        raise

    try:
        vdf.verify(challenge, difficulty, solution)
        valid = True
    except InvalidProof as e:
        logger.debug("vdf_proof_rejected", scheme=scheme.value, reason=str(e))
        valid = False

    logger.info(
        "vdf_verified",
        scheme=scheme.value,
        difficulty=difficulty,
        security=security,
        valid=valid,
    )
    return valid

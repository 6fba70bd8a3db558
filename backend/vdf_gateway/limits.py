from vdf_gateway.errors import ResourceLimitExceeded

# Hard ceilings applied before any VDF work. These are consensus values and
# must not be made configurable.
MAX_SECURITY = 2048
MAX_DIFFICULTY = 3_000_000_001  # Wesolowski target
MAX_WESOLOWSKI_DIFFICULTY = 3_000_000_001
MAX_PIETRZAK_DIFFICULTY = 900_000_000

U16_MAX = 0xFFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF


def narrow_security(security: int) -> int:
    """Narrow a u64 security parameter to u16 without wrapping."""
    if security > U16_MAX:
        raise ResourceLimitExceeded("security", security, U16_MAX)
    return security

from vdf_gateway.errors import ChallengeTooShort
from vdf_gateway.types import AUTHENTICATION_KEY_LENGTH, AccountAddress

KEY_FRAGMENT_LENGTH = 16


def extract_address_from_challenge(challenge: bytes) -> tuple[AccountAddress, bytes]:
    """
    Derive (address, key_fragment) from the authentication-key prefix of a challenge.

    The address is the last `AccountAddress.LENGTH` bytes of the 32-byte
    authentication key and the fragment is its first 16 bytes. This is a
    structural projection only; nothing is verified.
    """
    if len(challenge) < AUTHENTICATION_KEY_LENGTH:
        raise ChallengeTooShort(len(challenge), AUTHENTICATION_KEY_LENGTH)

    auth_key = bytes(challenge[:AUTHENTICATION_KEY_LENGTH])
    address = AccountAddress(auth_key[AUTHENTICATION_KEY_LENGTH - AccountAddress.LENGTH :])
    return address, auth_key[:KEY_FRAGMENT_LENGTH]

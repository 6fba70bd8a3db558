"""Shared fixtures: HTTP client and proofs for both schemes."""

import pytest
from fastapi.testclient import TestClient

from vdf_gateway.main import app
from vdf_gateway.middleware.rate_limit import limiter
from vdf_gateway.vdf import PietrzakVDF, WesolowskiVDF

# Pietrzak proof for challenge 0xaa, difficulty 100, security 512, as shipped
# with the host's native tests. Difficulty 100 needs no halving rounds, so the
# proof is the output y alone.
REFERENCE_PIETRZAK_SOLUTION = (
    "0051dfa4c3341c18197b72f5e5eecc693eb56d408206c206d90f5ec7a75f833b2a"
    "ffb0ea7280d4513ab8351f39362d362203ff3e41882309e7900f470f0a27eeeb7b"
)


@pytest.fixture
def reference_vector():
    """The host's published Pietrzak vector."""
    return {
        "challenge": bytes.fromhex("aa"),
        "solution": bytes.fromhex(REFERENCE_PIETRZAK_SOLUTION),
        "difficulty": 100,
        "security": 512,
    }


@pytest.fixture(scope="session")
def pietrzak_proof():
    """A Pietrzak proof for 0xaa at difficulty 1000: y followed by three mu values."""
    return {
        "challenge": b"\xaa",
        "solution": PietrzakVDF(512).solve(b"\xaa", 1000),
        "difficulty": 1000,
        "security": 512,
    }


@pytest.fixture(scope="session")
def wesolowski_proof():
    """A Wesolowski proof for 0xaa at difficulty 1000: y followed by pi."""
    return {
        "challenge": b"\xaa",
        "solution": WesolowskiVDF(512).solve(b"\xaa", 1000),
        "difficulty": 1000,
        "security": 512,
    }


@pytest.fixture
def client():
    """Create a test client with rate limiting disabled."""
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    limiter.enabled = True

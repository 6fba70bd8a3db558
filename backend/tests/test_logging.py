"""Tests for the structured log events emitted by the services."""

import pytest
from structlog.testing import CapturingLogger

from vdf_gateway.config import Settings
from vdf_gateway.errors import ResourceLimitExceeded
from vdf_gateway.limits import MAX_SECURITY
from vdf_gateway.logging_config import get_logger, setup_logging
from vdf_gateway.services import vdf_service


@pytest.fixture
def captured(monkeypatch):
    """Swap the service logger for one that records calls."""
    logger = CapturingLogger()
    monkeypatch.setattr(vdf_service, "logger", logger)
    return logger


def events(logger):
    """Flatten recorded calls to (method, event, fields)."""
    return [(call.method_name, call.args[0], call.kwargs) for call in logger.calls]


def test_verified_event(captured, pietrzak_proof):
    """Test that a verified proof logs scheme, parameters and outcome."""
    vdf_service.verify(
        pietrzak_proof["challenge"],
        pietrzak_proof["solution"],
        pietrzak_proof["difficulty"],
        pietrzak_proof["security"],
        use_wesolowski=False,
    )

    method, event, fields = events(captured)[-1]
    assert (method, event) == ("info", "vdf_verified")
    assert fields == {"scheme": "pietrzak", "difficulty": 1000, "security": 512, "valid": True}


def test_rejected_proof_logs_reason(captured):
    """Test that a rejected proof logs the reason at debug level."""
    vdf_service.verify(b"\xaa", b"", 100, 512, use_wesolowski=True)

    logged = events(captured)
    assert logged[0][:2] == ("debug", "vdf_proof_rejected")
    assert logged[-1][2]["valid"] is False


def test_limit_event(captured):
    """Test that a refused limit logs a warning with the parameter."""
    with pytest.raises(ResourceLimitExceeded):
        vdf_service.verify(b"\xaa", b"", 100, MAX_SECURITY + 1, use_wesolowski=False)

    [(method, event, fields)] = events(captured)
    assert (method, event) == ("warning", "vdf_limit_exceeded")
    assert fields["parameter"] == "security"
    assert fields["limit"] == MAX_SECURITY


def test_proof_bytes_are_never_logged(captured, pietrzak_proof):
    """Test that no log field carries raw challenge or proof bytes."""
    vdf_service.verify(
        pietrzak_proof["challenge"],
        pietrzak_proof["solution"],
        pietrzak_proof["difficulty"],
        pietrzak_proof["security"],
        use_wesolowski=False,
    )

    for call in captured.calls:
        for value in call.kwargs.values():
            assert not isinstance(value, (bytes, bytearray))


@pytest.mark.parametrize("log_format", ["console", "json"])
def test_setup_logging(log_format):
    """Test that both renderers configure without error."""
    setup_logging(Settings(_env_file=None, log_format=log_format, log_level="DEBUG"))
    get_logger("tests").info("logging_configured")

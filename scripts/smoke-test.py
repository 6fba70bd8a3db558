#!/usr/bin/env python3
"""
Smoke test for VDF Gateway deployments.

Proves locally with the vdf_gateway package and checks that the deployed
service accepts the proof, so a build whose class group arithmetic drifts
fails here before it serves traffic.

Flow (default):
1. Health check
2. Locally made Pietrzak proof verifies
3. Tampered proof is rejected (200, valid=false)
4. Pietrzak difficulty above the ceiling is refused (413)
5. Address extraction from a challenge

Usage:
    ./scripts/smoke-test.py https://staging.example.com
    ./scripts/smoke-test.py http://localhost:8000 --health-only

Requires the vdf_gateway package (pip install -e .) for the local prover.
"""

import argparse
import json
import random
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from vdf_gateway.vdf import PietrzakVDF

PROOF_CHALLENGE = b"\xaa"
PROOF_DIFFICULTY = 1000
PROOF_SECURITY = 512
PIETRZAK_CEILING = 900_000_000

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRIES = 2
DEFAULT_RETRY_BACKOFF_SECONDS = 0.5
MAX_BACKOFF_SECONDS = 4.0
MAX_ERROR_BODY_CHARS = 10_000


class ApiError(RuntimeError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"API error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def log(msg: str) -> None:
    """Print timestamped log message."""
    print(f"[{datetime.now().strftime('%H:%M:%S')}] {msg}", flush=True)


def _decode_limited(value: bytes, max_chars: int = MAX_ERROR_BODY_CHARS) -> str:
    decoded = value.decode("utf-8", errors="replace")
    if len(decoded) <= max_chars:
        return decoded
    return decoded[:max_chars] + "…"


def _is_retryable_status(status_code: int) -> bool:
    return status_code in {408, 425, 502, 503, 504, 522, 524}


@dataclass
class HttpClient:
    base_url: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retries: int = DEFAULT_RETRIES
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS

    def request(
        self, method: str, url: str, *, body: bytes | None = None
    ) -> tuple[int, bytes]:
        headers = {"Content-Type": "application/json"} if body is not None else {}
        max_attempts = max(1, self.retries + 1)
        for attempt in range(1, max_attempts + 1):
            try:
                request = Request(url, data=body, headers=headers, method=method)
                try:
                    with urlopen(request, timeout=self.timeout_seconds) as response:
                        return response.getcode(), response.read()
                except HTTPError as e:
                    error_body = e.read() if e.fp else b""
                    if attempt < max_attempts and _is_retryable_status(e.code):
                        self._sleep_backoff(attempt)
                        continue
                    return e.code, error_body
            except (URLError, TimeoutError) as e:
                if attempt < max_attempts:
                    self._sleep_backoff(attempt)
                    continue
                raise RuntimeError(f"Network error after {attempt} attempts: {e}") from e
        raise RuntimeError(f"No response from {method} {url}")

    def post_json(self, path: str, data: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        url = f"{self.base_url}/api/v1{path}"
        status, body = self.request("POST", url, body=json.dumps(data).encode())
        try:
            return status, json.loads(body.decode())
        except json.JSONDecodeError as e:
            raise ApiError(status, _decode_limited(body)) from e

    def _sleep_backoff(self, attempt: int) -> None:
        base = self.retry_backoff_seconds * (2 ** (attempt - 1))
        jitter = random.random() * self.retry_backoff_seconds
        time.sleep(min(MAX_BACKOFF_SECONDS, base + jitter))


def wait_for_health(client: HttpClient, max_attempts: int = 30, delay: float = 2.0) -> bool:
    """Wait for /health to return healthy status."""
    url = f"{client.base_url}/health"

    for attempt in range(1, max_attempts + 1):
        try:
            status, body = client.request("GET", url)
            if status == 200 and json.loads(body.decode()).get("status") == "healthy":
                log(f"Health check passed (attempt {attempt})")
                return True
        except (json.JSONDecodeError, RuntimeError):
            pass

        if attempt < max_attempts:
            time.sleep(delay)

    return False


def verify_payload(solution: bytes, **overrides: Any) -> dict[str, Any]:
    payload = {
        "challenge": PROOF_CHALLENGE.hex(),
        "solution": solution.hex(),
        "difficulty": PROOF_DIFFICULTY,
        "security": PROOF_SECURITY,
        "use_wesolowski": False,
    }
    payload.update(overrides)
    return payload


def expect_status(status: int, data: dict[str, Any], expected: int) -> None:
    if status != expected:
        raise ApiError(status, json.dumps(data)[:MAX_ERROR_BODY_CHARS])


@dataclass
class SmokeContext:
    client: HttpClient
    max_health_attempts: int
    solution: bytes = b""


@dataclass(frozen=True)
class Step:
    name: str
    run: Callable[[SmokeContext], None]


@dataclass(frozen=True)
class StepResult:
    name: str
    status: str  # passed|failed
    seconds: float
    detail: str | None = None


def _print_summary(results: list[StepResult], total_seconds: float) -> None:
    log("Summary:")
    for result in results:
        suffix = f" - {result.detail}" if result.detail else ""
        log(f"  {result.status.upper():7} {result.name} ({result.seconds:.2f}s){suffix}")
    log(f"Total: {total_seconds:.2f}s")


def run_steps(ctx: SmokeContext, steps: list[Step]) -> bool:
    results: list[StepResult] = []
    overall_start = time.time()

    for step in steps:
        log(f"STEP: {step.name}")
        start = time.time()
        try:
            step.run(ctx)
        except Exception as e:
            elapsed = time.time() - start
            results.append(StepResult(step.name, "failed", elapsed, str(e)))
            _print_summary(results, time.time() - overall_start)
            return False

        elapsed = time.time() - start
        results.append(StepResult(step.name, "passed", elapsed))
        log(f"OK: {step.name} ({elapsed:.2f}s)")

    _print_summary(results, time.time() - overall_start)
    return True


def step_health(ctx: SmokeContext) -> None:
    log(f"Checking health: {ctx.client.base_url}/health")
    if not wait_for_health(ctx.client, max_attempts=ctx.max_health_attempts):
        raise RuntimeError("Health check failed")


def step_valid_proof(ctx: SmokeContext) -> None:
    log(f"Proving locally: difficulty {PROOF_DIFFICULTY}, security {PROOF_SECURITY}")
    ctx.solution = PietrzakVDF(PROOF_SECURITY).solve(PROOF_CHALLENGE, PROOF_DIFFICULTY)
    status, data = ctx.client.post_json("/vdf/verify", verify_payload(ctx.solution))
    expect_status(status, data, 200)
    if data.get("valid") is not True:
        raise RuntimeError(f"Valid proof was rejected: {data}")


def step_tampered_proof(ctx: SmokeContext) -> None:
    tampered = bytearray(ctx.solution)
    tampered[-1] ^= 0x01
    status, data = ctx.client.post_json("/vdf/verify", verify_payload(bytes(tampered)))
    expect_status(status, data, 200)
    if data.get("valid") is not False:
        raise RuntimeError(f"Tampered proof was accepted: {data}")


def step_limit(ctx: SmokeContext) -> None:
    status, data = ctx.client.post_json(
        "/vdf/verify", verify_payload(b"", difficulty=PIETRZAK_CEILING + 2)
    )
    expect_status(status, data, 413)


def step_extract_address(ctx: SmokeContext) -> None:
    auth_key = bytes(range(32))
    status, data = ctx.client.post_json(
        "/challenges/address", {"challenge": (auth_key + b"\xff" * 8).hex()}
    )
    expect_status(status, data, 200)
    if data.get("address") != "0x" + auth_key.hex():
        raise RuntimeError(f"Unexpected address: {data}")
    if data.get("key_fragment") != auth_key[:16].hex():
        raise RuntimeError(f"Unexpected key fragment: {data}")


def main() -> int:
    parser = argparse.ArgumentParser(description="VDF Gateway smoke test")
    parser.add_argument("base_url", help="Base URL (e.g., https://staging.example.com)")
    parser.add_argument(
        "--health-only",
        action="store_true",
        help="Only run health check, skip full flow",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help=f"HTTP timeout seconds (default: {DEFAULT_TIMEOUT_SECONDS:g})",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_RETRIES,
        help=f"Retries for transient failures (default: {DEFAULT_RETRIES})",
    )
    parser.add_argument(
        "--max-health-attempts",
        type=int,
        default=30,
        help="Max health check attempts (default: 30)",
    )
    args = parser.parse_args()

    try:
        base_url = args.base_url.rstrip("/")
        client = HttpClient(base_url=base_url, timeout_seconds=args.timeout, retries=args.retries)
        ctx = SmokeContext(client=client, max_health_attempts=args.max_health_attempts)

        steps: list[Step] = [Step("health", step_health)]
        if args.health_only:
            log("Health-only mode: skipping full flow")
        else:
            steps.extend(
                [
                    Step("valid proof", step_valid_proof),
                    Step("tampered proof", step_tampered_proof),
                    Step("difficulty limit", step_limit),
                    Step("extract address", step_extract_address),
                ]
            )

        ok = run_steps(ctx, steps)
        return 0 if ok else 1
    except Exception as e:
        log(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

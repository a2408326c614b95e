"""Rollapp and DA node health checks."""

from __future__ import annotations

import json
import re
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

FAILED_DA_SUBMISSIONS_METRIC = "rollapp_consecutive_failed_da_submissions"

_INTEGER = re.compile(r"[+-]?[0-9]+")
_REQUEST_TIMEOUT = 10.0


def _fetch(url: str) -> bytes:
    """Return the body at ``url`` whatever the HTTP status."""
    try:
        with urllib.request.urlopen(url, timeout=_REQUEST_TIMEOUT) as response:  # noqa: S310
            return response.read()
    except urllib.error.HTTPError as exc:
        try:
            return exc.read()
        finally:
            exc.close()


@dataclass(frozen=True)
class RollappHealthResponse:
    """The JSON-RPC answer of a node's health endpoint."""

    jsonrpc: str = ""
    is_healthy: bool = False
    error: str = ""
    id: int = 0

    @classmethod
    def from_json(cls, body: str | bytes) -> RollappHealthResponse:
        """Parse a health response; raise ``ValueError`` when it is malformed."""
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError("health response is not a JSON object")
        result: Any = data.get("result") or {}
        if not isinstance(result, dict):
            raise ValueError("health response result is not a JSON object")
        is_healthy = result.get("isHealthy", False)
        if not isinstance(is_healthy, bool):
            raise ValueError("isHealthy is not a boolean")
        error = result.get("error") or ""
        if not isinstance(error, str):
            raise ValueError("error is not a string")
        response_id = data.get("id") or 0
        if not isinstance(response_id, int) or isinstance(response_id, bool):
            raise ValueError("id is not an integer")
        return cls(
            jsonrpc=str(data.get("jsonrpc") or ""),
            is_healthy=is_healthy,
            error=error,
            id=response_id,
        )


def is_endpoint_healthy(url: str) -> tuple[bool, str]:
    """Query a health endpoint.

    Returns ``(True, error)`` when the endpoint answered with a well-formed
    health response, where ``error`` is the error it reported, and
    ``(False, message)`` when it could not be reached or parsed.
    """
    try:
        body = _fetch(url)
    except OSError as exc:
        return False, f"Error making request: {exc}"
    try:
        response = RollappHealthResponse.from_json(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return False, "invalid json"
    except ValueError as exc:
        return False, f"Error unmarshaling JSON: {exc}"
    return True, response.error


def query_failed_da_submissions(host: str, prom_metric_port: str | int) -> int:
    """Return the number of consecutive failed DA submissions from Prometheus metrics."""
    endpoint = f"http://{host}:{prom_metric_port}/metrics"
    try:
        body = _fetch(endpoint)
    except OSError as exc:
        raise OSError(f"error fetching metrics: {exc}") from exc

    for line in body.decode("utf-8", errors="replace").splitlines():
        if not line.startswith(FAILED_DA_SUBMISSIONS_METRIC):
            continue
        parts = line.split()
        if len(parts) != 2:
            raise ValueError(f"unexpected format for metric line: {line}")
        if not _INTEGER.fullmatch(parts[1]):
            raise ValueError(f"error converting metric value to int: {parts[1]!r}")
        return int(parts[1])

    raise LookupError("metric not found")


def wait_for_healthy_rollapp(url: str, timeout: float = 20.0, interval: float = 2.0) -> bool:
    """Poll ``url`` every ``interval`` seconds until the rollapp reports healthy.

    Returns ``True`` once healthy and ``False`` when ``timeout`` runs out.
    """
    print("waiting for rollapp to become healthy")
    deadline = time.monotonic() + timeout
    while True:
        remaining = deadline - time.monotonic()
        if remaining < interval:
            time.sleep(max(remaining, 0.0))
            print(
                f"Timeout: Failed to receive expected response within {timeout:g} seconds"
            )
            return False
        time.sleep(interval)
        try:
            body = _fetch(url)
        except OSError as exc:
            print(f"Error making request: {exc}")
            continue
        try:
            response = RollappHealthResponse.from_json(body)
        except ValueError as exc:
            print(f"Error unmarshaling JSON: {exc}")
            continue
        if response.is_healthy:
            print("RollApp is healthy")
            return True
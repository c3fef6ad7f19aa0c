"""Shared HTTP helpers used by the registry client.

Encapsulates request/timeout/retry handling for unary Connect calls so the
client only deals with request and response payloads. Failures surface as
``RemoteError`` carrying the caller's operation context.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

import requests

from constants import Constants
from common.errors import RemoteError
from common.logging_utils import extra_context, is_debug_enabled, redact, safe_url, Timer

logger = logging.getLogger(__name__)


def _connect_error(response: requests.Response) -> tuple:
    """Extract (code, message) from a Connect error body, if there is one."""
    try:
        body = json.loads(response.text or "")
    except json.JSONDecodeError:
        body = None
    if isinstance(body, dict) and (body.get("code") or body.get("message")):
        return body.get("code"), redact(body.get("message")) or f"HTTP {response.status_code}"
    return None, f"HTTP {response.status_code}"


def connect_post(
    url: str,
    payload: Dict[str, Any],
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """POST a JSON payload to a Connect unary endpoint and return the JSON body.

    Transport errors and 5xx responses are retried with exponential back-off;
    anything else non-2xx fails immediately.

    Args:
        url: Fully qualified ``https://<remote>/<service>/<method>`` URL.
        payload: Request message as a JSON-compatible dict.
        context: Human-readable operation, used as the error prefix.
        headers: Extra request headers (e.g. Authorization).
        timeout: Per-attempt timeout in seconds.

    Returns:
        Decoded response message.

    Raises:
        RemoteError: When every attempt failed or the server rejected the call.
    """
    request_headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Connect-Protocol-Version": Constants.CONNECT_PROTOCOL_VERSION,
    }
    if headers:
        request_headers.update(headers)
    timeout = timeout or Constants.REQUEST_TIMEOUT
    safe_target = safe_url(url)
    last_error = "no attempt made"

    for attempt in range(Constants.HTTP_RETRY_MAX):
        if attempt:
            time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** (attempt - 1)))
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="http_client",
                        action="POST",
                        target=safe_target,
                        context=context,
                        attempt=attempt + 1,
                    )
                )
            try:
                response = requests.post(
                    url,
                    data=json.dumps(payload),
                    headers=request_headers,
                    timeout=timeout,
                )
            except requests.Timeout:
                last_error = f"request timed out after {timeout} seconds"
                logger.debug("%s: %s (attempt %d)", context, last_error, attempt + 1)
                continue
            except requests.RequestException as exc:  # includes ConnectionError
                last_error = f"connection error: {redact(str(exc))}"
                logger.debug("%s: %s (attempt %d)", context, last_error, attempt + 1)
                continue

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="POST",
                    status_code=response.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                )
            )

        if response.status_code >= 500:
            code, message = _connect_error(response)
            last_error = f"{code}: {message}" if code else message
            continue
        if response.status_code >= 300:
            code, message = _connect_error(response)
            raise RemoteError(context, message, code=code, status_code=response.status_code)

        try:
            body = json.loads(response.text or "{}")
        except json.JSONDecodeError as exc:
            raise RemoteError(context, f"invalid JSON response: {exc}",
                              status_code=response.status_code) from exc
        if not isinstance(body, dict):
            raise RemoteError(context, "unexpected response shape", status_code=response.status_code)
        return body

    raise RemoteError(context, f"request failed after {Constants.HTTP_RETRY_MAX} attempts: {last_error}")

from __future__ import annotations  # LLM request gateway module

import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple

import httpx

from config import LlmRoute, interviewer_route


logger = logging.getLogger(__name__)  # Module logger setup


_MODEL_LOCKS: Dict[str, threading.Lock] = {}
_MODEL_LOCKS_GUARD = threading.Lock()


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


ChatModel = Callable[[Sequence[Dict[str, str]]], str]


def _lock_for(cfg: LlmRoute) -> threading.Lock:
    key = cfg.name or f"{cfg.base_url}{cfg.endpoint}"
    with _MODEL_LOCKS_GUARD:
        lock = _MODEL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _MODEL_LOCKS[key] = lock
    return lock


def complete(
    messages: Sequence[Dict[str, str]],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> str:  # Send a chat transcript and return the plain-text reply
    base_messages = _normalize_messages(messages)
    attempts = cfg.max_retries + 1
    preview = _preview(base_messages)
    if len(preview) > 120:
        preview = preview[:117] + "..."
    logger.info(
        "LLM request start route=%s model=%s attempts=%d preview=%s",
        cfg.name,
        cfg.model,
        attempts,
        preview,
    )
    payload: Dict[str, Any] = {
        "model": cfg.model,
        "messages": base_messages,
        "max_tokens": cfg.max_tokens,
        "temperature": cfg.temperature,
    }
    headers = {"Content-Type": "application/json"}
    if cfg.api_key_env:
        api_key = os.getenv(cfg.api_key_env)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)

    last_error: Optional[Exception] = None
    for attempt in range(attempts):
        logger.info(
            "LLM request send route=%s model=%s attempt=%d/%d",
            cfg.name,
            cfg.model,
            attempt + 1,
            attempts,
        )
        try:
            response, close_cb = _post(f"{cfg.base_url}{cfg.endpoint}", payload, headers, cfg.timeout_s, client)
        except httpx.TransportError as exc:
            logger.warning("LLM transport failure attempt=%d: %s", attempt + 1, exc)
            last_error = exc
            continue
        try:
            if response.status_code >= 500:
                logger.warning("LLM server error status=%s attempt=%d", response.status_code, attempt + 1)
                last_error = LlmGatewayError(f"LLM returned status {response.status_code}")
                continue
            if response.status_code >= 400:
                logger.error("LLM error status: %s", response.status_code)
                raise LlmGatewayError(f"LLM returned status {response.status_code}")
            try:
                data = response.json()
            except ValueError as exc:
                logger.error("Invalid JSON payload from LLM: %s", exc)
                raise LlmGatewayError("LLM payload was not JSON") from exc
            content = _extract_content(data)
        finally:
            _close_safely(close_cb)
        logger.info("LLM request done route=%s model=%s attempt=%d", cfg.name, cfg.model, attempt + 1)
        return content
    raise LlmGatewayError("LLM request failed after retries") from last_error


def interviewer_model(
    cfg: Optional[LlmRoute] = None,
    *,
    client: Optional[HttpClient] = None,
    sequential: bool = False,
) -> ChatModel:  # Build the callable bound under the interviewer registry key
    route = cfg or interviewer_route()

    def _invoke(messages: Sequence[Dict[str, str]]) -> str:
        if sequential:
            with _lock_for(route):
                return complete(messages, cfg=route, client=client)
        return complete(messages, cfg=route, client=client)

    return _invoke


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except httpx.TransportError:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> list[Dict[str, str]]:  # Ensure message payload shape
    normalized: list[Dict[str, str]] = []
    for item in messages:
        if not isinstance(item, dict):
            raise TypeError("Each chat message must be a dict with role/content")
        role = str(item.get("role", "")).strip()
        content = str(item.get("content", ""))
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": content})
    return normalized


def _preview(messages: Sequence[Dict[str, str]]) -> str:  # Build preview string for logging
    for message in reversed(messages):
        text = message.get("content", "").strip()
        if text:
            return text.splitlines()[0]
    return ""


def _extract_content(data: Any) -> str:  # Extract message content from LLM response
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        if isinstance(data.get("content"), str):
            return data["content"]
    raise LlmGatewayError("LLM response missing content")

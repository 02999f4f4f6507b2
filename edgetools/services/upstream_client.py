from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloudflareCredentials:
    account_id: str
    email: str
    api_key: str = field(repr=False)

    @classmethod
    def from_values(
        cls,
        *,
        account_id: str | None,
        email: str | None,
        api_key: str | None,
    ) -> CloudflareCredentials | None:
        account_id = (account_id or "").strip()
        email = (email or "").strip()
        api_key = (api_key or "").strip()
        if not account_id or not email or not api_key:
            return None
        return cls(account_id=account_id, email=email, api_key=api_key)


@dataclass(frozen=True)
class UpstreamOk:
    status_code: int
    payload: Any
    text: str


@dataclass(frozen=True)
class UpstreamErr:
    cause_message: str
    status_code: int | None = None
    provider_message: str | None = None
    not_found: bool = False

    @property
    def message(self) -> str:
        return self.provider_message or self.cause_message


UpstreamOutcome = Union[UpstreamOk, UpstreamErr]


class UpstreamError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        provider_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.provider_message = provider_message

    @classmethod
    def from_outcome(cls, outcome: UpstreamErr) -> UpstreamError:
        return cls(
            outcome.cause_message,
            status_code=outcome.status_code,
            provider_message=outcome.provider_message,
        )


def expect_ok(outcome: UpstreamOutcome) -> UpstreamOk:
    if isinstance(outcome, UpstreamErr):
        raise UpstreamError.from_outcome(outcome)
    return outcome


def result_field(payload: Any, key: str) -> str | None:
    """Read a non-empty string from a Workers AI `{"result": {...}}` envelope."""
    if not isinstance(payload, dict):
        return None
    result = payload.get("result")
    if not isinstance(result, dict):
        return None
    value = result.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


class UpstreamClient:
    def __init__(
        self,
        *,
        credentials: CloudflareCredentials | None,
        api_base_url: str,
        timeout_seconds: int = 30,
    ) -> None:
        self._credentials = credentials
        self._base_url = (api_base_url or "").strip().rstrip("/")
        if not self._base_url:
            raise RuntimeError("CLOUDFLARE_API_BASE_URL is required.")
        self._timeout_seconds = max(1, int(timeout_seconds))

    def account_url(self, path: str) -> str:
        if self._credentials is None:
            raise RuntimeError("Cloudflare credentials are not configured.")
        return f"{self._base_url}/accounts/{self._credentials.account_id}/{path.lstrip('/')}"

    def call(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
        ok_statuses: tuple[int, ...] = (200,),
        not_found_is_distinct: bool = False,
    ) -> UpstreamOutcome:
        if self._credentials is None:
            return UpstreamErr(cause_message="Cloudflare credentials are not configured.")

        merged = dict(headers or {})
        merged["X-Auth-Email"] = self._credentials.email
        merged["X-Auth-Key"] = self._credentials.api_key
        if json is not None:
            merged.setdefault("Content-Type", "application/json")

        method = method.upper()
        logger.info("Upstream %s %s", method, url)
        try:
            response = requests.request(
                method,
                url,
                headers=merged,
                json=json,
                data=data,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.warning("Upstream %s %s failed: %s", method, url, exc)
            return UpstreamErr(cause_message=str(exc) or exc.__class__.__name__)

        status = response.status_code
        if status in ok_statuses:
            logger.info("Upstream %s %s -> %s", method, url, status)
            return UpstreamOk(
                status_code=status,
                payload=_parse_json(response),
                text=response.text,
            )

        logger.warning("Upstream %s %s -> %s", method, url, status)
        return UpstreamErr(
            cause_message=f"Request failed: {status} - {response.reason or 'error'}",
            status_code=status,
            provider_message=_provider_message(response),
            not_found=not_found_is_distinct and status == 404,
        )


def _parse_json(response: requests.Response) -> Any:
    content_type = (response.headers.get("Content-Type") or "").lower()
    if "json" not in content_type:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _provider_message(response: requests.Response) -> str | None:
    payload = _parse_json(response)
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None

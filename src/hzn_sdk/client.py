"""Typed REST clients for the local agent API and the exchange API.

Both clients issue exactly one request per call: no retries and no timeout.
Failures are raised as :mod:`hzn_sdk.errors` types; :mod:`hzn_sdk.api` turns
them into process exits.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence, TextIO

import requests
from pydantic import BaseModel, ValidationError

from hzn_sdk.auth import basic_auth_header
from hzn_sdk.config import EXCHANGE_URL_ENV_VAR, HORIZON_URL_ENV_VAR, get_horizon_url_base
from hzn_sdk.decode import ResponseTarget, decode_body, encode_body
from hzn_sdk.errors import HznSDKError, StatusError, TransportError
from hzn_sdk.options import DEFAULT_OPTIONS, GlobalOptions
from hzn_sdk.output import verbose
from hzn_sdk.status import is_good_code, is_success_code

DRY_RUN_PUT_POST_CODE = 201
DRY_RUN_DELETE_CODE = 204

_ACCEPT_JSON = {"Accept": "application/json"}


@dataclass(frozen=True)
class APIResult:
    code: int
    body: Any = None
    text: str = ""
    error: HznSDKError | None = None


class ExchangeErrorResponse(BaseModel):
    code: str = ""
    msg: str = ""


def _as_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


class _RESTClient(ABC):
    base_url: str
    options: GlobalOptions
    stderr: TextIO | None
    _session: requests.Session

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def _verbose(self, msg: str, *args) -> None:
        verbose(self.options, msg, *args, stderr=self.stderr)

    @abstractmethod
    def _connect_error(self, api_msg: str, exc: Exception) -> str:
        """Message for a request that never got an HTTP response."""

    def _send(
        self,
        method: str,
        url: str,
        api_msg: str,
        *,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> tuple[int, bytes]:
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=headers or None,
                timeout=None,
            )
        except requests.RequestException as exc:
            raise TransportError(self._connect_error(api_msg, exc)) from exc

        self._verbose("HTTP code: %d", response.status_code)
        return response.status_code, response.content or b""


@dataclass
class LocalAgentClient(_RESTClient):
    """Client for the agent's REST API on this host. Calls are anonymous."""

    base_url: str | None = None
    options: GlobalOptions = DEFAULT_OPTIONS
    stderr: TextIO | None = None

    def __post_init__(self) -> None:
        if not self.base_url:
            self.base_url = get_horizon_url_base()
        self._session = requests.Session()

    def _connect_error(self, api_msg: str, exc: Exception) -> str:
        if not os.getenv(HORIZON_URL_ENV_VAR):
            return (
                f"Can't connect to the Horizon REST API to run {api_msg}. Run 'systemctl status "
                "horizon' to check if the Horizon agent is running. Or set HORIZON_URL to connect "
                "to another local port that is connected to a remote Horizon agent via a ssh "
                f"tunnel. Specific error is: {exc}"
            )
        return (
            f"Can't connect to the Horizon REST API to run {api_msg}. Maybe the ssh tunnel "
            "associated with that port is down? Or maybe the remote Horizon agent at the other "
            f"end of that tunnel is down. Specific error is: {exc}"
        )

    def get(
        self,
        path: str,
        good_codes: Sequence[int] = (),
        target: ResponseTarget | None = None,
    ) -> APIResult:
        """GET a resource.

        The body is decoded into ``target`` only when the code matches the
        first good code, so a tolerated 404 is reported by its code alone.
        """
        url = self._url(path)
        api_msg = f"GET {url}"
        self._verbose(api_msg)

        code, body = self._send("GET", url, api_msg)
        if not is_good_code(code, good_codes):
            raise StatusError(
                f"bad HTTP code from {api_msg}: {code}",
                status_code=code,
                body=_as_text(body),
            )

        value = None
        if target is not None and is_success_code(code, good_codes):
            value = decode_body(body, target, source=api_msg)
        return APIResult(code=code, body=value, text=_as_text(body))

    def put_post(
        self,
        method: str,
        path: str,
        good_codes: Sequence[int],
        body: Any,
    ) -> APIResult:
        url = self._url(path)
        api_msg = f"{method} {url}"
        self._verbose(api_msg)
        if self.options.dry_run:
            return APIResult(code=DRY_RUN_PUT_POST_CODE)

        payload, content_headers = encode_body(body, source=api_msg)
        code, raw = self._send(
            method,
            url,
            api_msg,
            data=payload,
            headers={**_ACCEPT_JSON, **content_headers},
        )
        text = _as_text(raw)
        if not is_good_code(code, good_codes):
            raise StatusError(
                f"bad HTTP code {code} from {api_msg}: {text}",
                status_code=code,
                body=text,
            )
        return APIResult(code=code, text=text)

    def delete(self, path: str, good_codes: Sequence[int] = ()) -> APIResult:
        url = self._url(path)
        api_msg = f"DELETE {url}"
        self._verbose(api_msg)
        if self.options.dry_run:
            return APIResult(code=DRY_RUN_DELETE_CODE)

        code, raw = self._send("DELETE", url, api_msg)
        text = _as_text(raw)
        if not is_good_code(code, good_codes):
            raise StatusError(
                f"bad HTTP code {code} from {api_msg}: {text}",
                status_code=code,
                body=text,
            )
        return APIResult(code=code, text=text)


@dataclass
class RegistryClient(_RESTClient):
    """Client for the exchange REST API.

    Every call takes a credentials string (``id:secret``). A non-empty one is
    sent as Basic auth, an empty one makes the call anonymous.
    """

    base_url: str
    options: GlobalOptions = DEFAULT_OPTIONS
    stderr: TextIO | None = None

    def __post_init__(self) -> None:
        self._session = requests.Session()

    def _connect_error(self, api_msg: str, exc: Exception) -> str:
        if not os.getenv(EXCHANGE_URL_ENV_VAR):
            return (
                f"Can't connect to the Horizon Exchange REST API to run {api_msg}. Set "
                "HZN_EXCHANGE_URL to use an Exchange other than the one the Horizon Agent is "
                f"currently configured for. Specific error is: {exc}"
            )
        return (
            f"Can't connect to the Horizon Exchange REST API to run {api_msg}. Maybe "
            "HZN_EXCHANGE_URL is set incorrectly? Or unset HZN_EXCHANGE_URL to use the Exchange "
            f"that the Horizon Agent is configured for. Specific error is: {exc}"
        )

    def get(
        self,
        path: str,
        credentials: str,
        good_codes: Sequence[int] = (),
        target: ResponseTarget | None = None,
    ) -> APIResult:
        url = self._url(path)
        api_msg = f"GET {url}"
        self._verbose(api_msg)

        code, body = self._send(
            "GET",
            url,
            api_msg,
            headers={**_ACCEPT_JSON, **basic_auth_header(credentials)},
        )
        text = _as_text(body)
        if not is_good_code(code, good_codes):
            raise StatusError(
                f"bad HTTP code {code} from {api_msg}, output: {text}",
                status_code=code,
                body=text,
            )

        value = None
        # The exchange front end answers some auth failures with an empty body.
        if target is not None and is_success_code(code, good_codes):
            value = decode_body(body, target, allow_empty=True, source=api_msg)
        return APIResult(code=code, body=value, text=text)

    def put_post(
        self,
        method: str,
        path: str,
        credentials: str,
        good_codes: Sequence[int],
        body: Any,
    ) -> APIResult:
        """PUT or POST ``body``. A ``str`` body is taken to be JSON already."""
        url = self._url(path)
        api_msg = f"{method} {url}"
        self._verbose(api_msg)
        if self.options.dry_run:
            return APIResult(code=DRY_RUN_PUT_POST_CODE)

        payload, content_headers = encode_body(body, text_is_json=True, source=api_msg)
        code, raw = self._send(
            method,
            url,
            api_msg,
            data=payload,
            headers={**_ACCEPT_JSON, **content_headers, **basic_auth_header(credentials)},
        )
        text = _as_text(raw)
        if not is_good_code(code, good_codes):
            raise StatusError(
                f"bad HTTP code {code} from {api_msg}: {_describe_exchange_error(raw)}",
                status_code=code,
                body=text,
            )
        return APIResult(code=code, text=text)

    def delete(self, path: str, credentials: str, good_codes: Sequence[int] = ()) -> APIResult:
        url = self._url(path)
        api_msg = f"DELETE {url}"
        self._verbose(api_msg)
        if self.options.dry_run:
            return APIResult(code=DRY_RUN_DELETE_CODE)

        # Delete never returns a body.
        code, _ = self._send("DELETE", url, api_msg, headers=basic_auth_header(credentials))
        if not is_good_code(code, good_codes):
            raise StatusError(f"bad HTTP code {code} from {api_msg}", status_code=code)
        return APIResult(code=code)


def _describe_exchange_error(raw: bytes) -> str:
    try:
        parsed = ExchangeErrorResponse.model_validate_json(raw)
    except ValidationError:
        return _as_text(raw)
    if not parsed.code and not parsed.msg:
        return _as_text(raw)
    return f"{parsed.code}, {parsed.msg}"


__all__ = [
    "APIResult",
    "DRY_RUN_DELETE_CODE",
    "DRY_RUN_PUT_POST_CODE",
    "ExchangeErrorResponse",
    "LocalAgentClient",
    "RegistryClient",
]

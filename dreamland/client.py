"""HTTP client for the API of a running dreamland multiverse."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from typing import Any

import requests

from dreamland.config import DEFAULT_DREAMLAND_URL
from dreamland.inject import Injectable, Method
from dreamland.models import Echart, UniverseInfo, UniverseStatus

DEFAULT_TIMEOUT = 3.0
"""Request timeout in seconds used when none is given."""

DEV = bool(os.environ.get("DREAMLAND_DEV"))
"""Whether internal fixtures are offered on the command line."""

_PROVIDERS = {"github": True, "bitbucket": False}
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")


class DreamlandError(Exception):
    """Raised when the client is misconfigured or an API call fails."""


def _check_request_uri(url: str) -> None:
    if not url:
        raise ValueError("empty url")
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise ValueError("invalid control character in URL")
    if url.startswith(":"):
        raise ValueError("missing protocol scheme")
    match = _SCHEME_RE.match(url)
    rest = url[match.end():] if match else url
    if not rest.startswith("/"):
        raise ValueError("invalid URI for request")


def _jsonable(value: Any) -> Any:
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return _jsonable(to_json())
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _option_error(message: str) -> DreamlandError:
    return DreamlandError(
        f"When Creating Dreamland HTTP Client, parsing options failed with: {message}"
    )


class Client:
    """Talks to the multiverse API at ``url``."""

    def __init__(
        self,
        url: str = DEFAULT_DREAMLAND_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        provider: str | None = None,
        token: str | None = None,
        unsecure: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        try:
            _check_request_uri(url)
        except ValueError as err:
            raise _option_error(f"New client options: Parsing url failed with {err}") from err

        if provider is not None:
            if provider not in _PROVIDERS:
                raise _option_error(f"New client provider option `{provider}` unknown")
            if not _PROVIDERS[provider]:
                raise _option_error(f"New client provider option `{provider}` not enabled")

        if token is not None and not token:
            raise _option_error("New client token option can not be empty")

        if timeout < 1:
            raise _option_error("New client timeout option too low (<1s)")

        self.url = url
        self.timeout = timeout
        self.provider = provider or ""
        self.token = token or ""
        self.unsecure = unsecure
        self.auth_header = f"{self.provider} {self.token}"

        self._session = session if session is not None else requests.Session()
        if unsecure:
            self._session.verify = False

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        self._session.close()

    def _request(self, method: str, path: str, data: Any = None) -> Any:
        headers: dict[str, str] = {}
        if self.auth_header.strip():
            headers["Authorization"] = self.auth_header

        body = None
        if data is not None:
            try:
                body = json.dumps(_jsonable(data)).encode("utf-8")
            except (TypeError, ValueError) as err:
                raise DreamlandError(
                    f"{method} -- `{path}` failed to marshal data with: {err}"
                ) from err
            headers["Content-Type"] = "application/json"

        try:
            response = self._session.request(
                method, self.url + path, data=body, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as err:
            raise DreamlandError(f"{method} -- `{path}` do failed with: {err}") from err

        with response:
            if response.status_code not in (200, 400):
                raise DreamlandError(
                    f"{method} -- `{path}` failed with status: "
                    f"{response.status_code} {response.reason}"
                )
            content = response.content

        try:
            decoded = json.loads(content)
        except ValueError as err:
            raise DreamlandError(
                f"{method} -- `{path}` Unmarshal error failed with: {err}"
            ) from err

        if decoded is not None and not isinstance(decoded, dict):
            raise DreamlandError(
                f"{method} -- `{path}` Unmarshal error failed with: "
                f"cannot unmarshal {type(decoded).__name__} into an error response"
            )
        if isinstance(decoded, dict):
            message = decoded.get("error")
            if message is not None and not isinstance(message, str):
                raise DreamlandError(
                    f"{method} -- `{path}` Unmarshal error failed with: "
                    "error field is not a string"
                )
            if message:
                raise DreamlandError(f"{method} -- `{path}` failed with: {message}")
        return decoded

    def _get_object(self, path: str) -> dict[str, Any]:
        decoded = self._request("GET", path)
        if decoded is None:
            return {}
        return decoded

    def universe(self, name: str) -> Universe:
        """Handle on the universe called ``name``."""
        return Universe(name=name, client=self)

    def status(self) -> dict[str, UniverseStatus]:
        """Status of every universe in the multiverse, by name."""
        path = "/status"
        result = {}
        for name, value in self._get_object(path).items():
            if value is not None and not isinstance(value, dict):
                raise DreamlandError(
                    f"GET -- `{path}` failed to parse json with: "
                    f"status of `{name}` is not an object"
                )
            result[name] = UniverseStatus.from_json(value or {})
        return result

    def start_universe_with_config(self, name: str, config: Any) -> None:
        """Start a new universe called ``name`` with ``config``."""
        self._request("POST", "/universe/" + name, {"config": config})


@dataclass
class Universe:
    """A named universe reached through a client."""

    name: str
    client: Client = field(repr=False)

    def inject(self, *injectables: Injectable) -> None:
        """Run each injection in order, stopping at the first failure."""
        for op in injectables:
            try:
                self._run_injection(op)
            except DreamlandError as err:
                raise DreamlandError(f"Injection `{op.name}` failed with error: {err}") from err

    def _run_injection(self, op: Injectable) -> None:
        body: dict[str, Any] = {"params": [] if op.params is None else op.params}
        if op.config is not None:
            body["config"] = op.config
        if op.method is not Method.POST:
            raise DreamlandError(f"Method not supported {op.method}")
        self.client._request("POST", op.path(self.name), body)

    def kill_service(self, service: str) -> None:
        """Stop the service ``service`` in this universe."""
        self.client._request("DELETE", f"/service/{self.name}/{service}")

    def kill_simple(self, simple: str) -> None:
        """Stop the simple node ``simple`` in this universe."""
        self.client._request("DELETE", f"/simple/{self.name}/{simple}")

    def kill(self) -> None:
        """Stop this universe."""
        self.client._request("DELETE", "/universe/" + self.name)

    def status(self) -> Echart:
        """Network chart of the nodes in this universe."""
        return Echart.from_json(self.client._get_object("/les/miserables/" + self.name))

    def id(self) -> UniverseInfo:
        """Identity of this universe."""
        return UniverseInfo.from_json(self.client._get_object("/id/" + self.name))
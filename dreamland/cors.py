"""A forwarding proxy that adds CORS headers, served as a WSGI application."""

from __future__ import annotations

import base64
from typing import Any, Iterable, Mapping, Sequence
from urllib.parse import urlsplit

import requests
from werkzeug.datastructures import Headers
from werkzeug.wrappers import Request, Response

USER_AGENT = "git/@isomorphic-git/cors-proxy"

_BASIC_PREFIX = "Basic "
_ALLOWED_METHODS = frozenset({"GET", "POST", "HEAD", "OPTIONS"})
_HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)
_DROPPED_REQUEST_HEADERS = frozenset({"host", "content-length"})


def _is_request_uri(url: str) -> bool:
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        return False
    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018 - raises on a malformed port
    except ValueError:
        return False
    return " " not in parts.netloc


def get_url(query: Mapping[str, Sequence[str]]) -> str:
    """Target URL named by the ``u`` query parameter."""
    values = query.get("u") or []
    if not values or not values[0]:
        raise ValueError("URL is missing")
    url = "https:/" + values[0]
    if not _is_request_uri(url):
        raise ValueError("400 - bad URL")
    return url


def _error(headers: Headers, code: int, message: str) -> Response:
    return Response(message, status=code, headers=headers)


def _basic_authorization(credential: str) -> str:
    encoded = base64.b64encode(credential.encode()).decode()
    return _BASIC_PREFIX + encoded


class CorsProxy:
    """Forwards requests to the URL in ``?u=`` and answers with CORS headers."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session if session is not None else requests.Session()

    def __call__(self, environ: dict[str, Any], start_response: Any) -> Iterable[bytes]:
        response = self._handle(Request(environ))
        return response(environ, start_response)

    def _handle(self, request: Request) -> Response:
        headers = Headers()
        headers.add("Access-Control-Allow-Origin", "*")
        headers.add("Access-Control-Allow-Credentials", "true")
        headers.add("Access-Control-Allow-Methods", "GET, HEAD, POST, OPTIONS")

        if request.method not in _ALLOWED_METHODS:
            return _error(headers, 401, "Wrong Method")

        if request.method == "OPTIONS":
            for name, value in request.headers.items():
                if "Access-Control-Request" in name:
                    headers.add(name.replace("Request", "Allow", 1), value)
            return Response(status=200, headers=headers)

        credential = request.headers.get("Authorization", "").removeprefix("github ")

        try:
            url = get_url(request.args.to_dict(flat=False))
        except ValueError as err:
            return _error(headers, 500, str(err))

        outgoing = requests.structures.CaseInsensitiveDict(
            (name, value)
            for name, value in request.headers.items()
            if name.lower() not in _DROPPED_REQUEST_HEADERS
        )
        outgoing["User-Agent"] = USER_AGENT
        outgoing["Authorization"] = _basic_authorization(credential)

        body = request.get_data() or None
        try:
            with self._session.request(
                request.method, url, headers=outgoing, data=body, stream=True
            ) as upstream:
                content = upstream.raw.read(decode_content=False)
                status = upstream.status_code
                upstream_headers = list(upstream.headers.items())
        except (requests.RequestException, OSError) as err:
            return _error(headers, 500, str(err))

        headers.set("Access-Control-Allow-Origin", "*")
        for name, value in upstream_headers:
            lowered = name.lower()
            if lowered == "access-control-allow-origin" or lowered in _HOP_BY_HOP:
                continue
            headers.add(name, value)
        return Response(content, status=status, headers=headers)
"""Blocking HTTP transport used to fetch directories and nonces.

The loader and the nonce client only need two verbs, ``GET`` and
``HEAD``.  :class:`Transport` is the seam tests replace; the default
:class:`UrllibTransport` uses :mod:`urllib.request` with an optional
custom CA bundle.

HTTP error statuses are *returned* as an :class:`HttpResponse` so the
caller decides what a non-2xx status means.  Failures that leave no
complete response (malformed URL, DNS, refused connection, TLS,
timeout, a body cut short) raise :class:`TransportError`.
"""

from __future__ import annotations

import abc
import contextlib
import http.client
import logging
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from acmedir.config.settings import TransportSettings

log = logging.getLogger(__name__)

_MAX_BODY_BYTES = 1024 * 1024


class TransportError(Exception):
    """Raised when a request fails without producing an HTTP response."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{reason} ({url})")


@dataclass(frozen=True)
class HttpResponse:
    """Status, headers and body of a completed request.

    Header names are stored lower-cased.
    """

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300  # noqa: PLR2004

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())


class Transport(abc.ABC):
    """Minimal blocking HTTP client interface."""

    @abc.abstractmethod
    def request(self, method: str, url: str) -> HttpResponse:
        """Send a body-less request and return the response.

        Raises
        ------
        TransportError
            If no complete HTTP response was received.

        """

    def get(self, url: str) -> HttpResponse:
        return self.request("GET", url)

    def head(self, url: str) -> HttpResponse:
        return self.request("HEAD", url)


class UrllibTransport(Transport):
    """:class:`Transport` backed by :mod:`urllib.request`.

    Parameters
    ----------
    settings:
        The ``transport`` configuration section.  ``None`` uses the
        built-in defaults (system trust store, no explicit timeout).

    """

    def __init__(self, settings: TransportSettings | None = None) -> None:
        if settings is None:
            from acmedir.config.settings import build_transport  # noqa: PLC0415

            settings = build_transport(None)
        self._settings = settings
        self._opener: urllib.request.OpenerDirector | None = None

    def _get_ssl_context(self) -> ssl.SSLContext:
        """Build an SSL context honouring ``ca_cert_path`` / ``verify_ssl``."""
        ctx = ssl.create_default_context()

        if self._settings.ca_cert_path:
            ctx.load_verify_locations(self._settings.ca_cert_path)

        if not self._settings.verify_ssl:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE

        return ctx

    def _get_opener(self) -> urllib.request.OpenerDirector:
        if self._opener is None:
            handler = urllib.request.HTTPSHandler(context=self._get_ssl_context())
            self._opener = urllib.request.build_opener(handler)
        return self._opener

    def request(self, method: str, url: str) -> HttpResponse:
        kwargs = {}
        if self._settings.timeout_seconds is not None:
            kwargs["timeout"] = self._settings.timeout_seconds

        log.debug("%s %s", method, url, extra={"directory_url": url})
        try:
            req = urllib.request.Request(
                url,
                method=method,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self._settings.user_agent,
                },
            )
            with self._get_opener().open(req, **kwargs) as resp:
                body = resp.read() if method != "HEAD" else b""
                return HttpResponse(
                    status=resp.status,
                    headers=_lower_headers(resp.headers),
                    body=body,
                )
        except urllib.error.HTTPError as exc:
            body = b""
            if method != "HEAD":
                with contextlib.suppress(OSError, http.client.HTTPException):
                    body = exc.read(_MAX_BODY_BYTES)
            return HttpResponse(
                status=exc.code,
                headers=_lower_headers(exc.headers),
                body=body,
            )
        except (urllib.error.URLError, OSError, http.client.HTTPException) as exc:
            reason = getattr(exc, "reason", None) or exc
            raise TransportError(url, str(reason) or type(exc).__name__) from exc
        except ValueError as exc:
            # malformed URL: no scheme, bad host or port
            raise TransportError(url, f"invalid URL: {exc}") from exc


def _lower_headers(headers) -> dict[str, str]:
    if headers is None:
        return {}
    return {k.lower(): v for k, v in headers.items()}

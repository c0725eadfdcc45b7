"""Options, cookies, extra headers and errors of Chromium conversions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

DEFAULT_TEMPLATE = "<html><head></head><body></body></html>"


class ChromiumError(Exception):
    """Base error of Chromium conversions.

    An optional detail is placed before the error's own message, separated
    by a colon.
    """

    message = "chromium error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{detail}: {self.message}" if detail else self.message)


class InvalidEmulatedMediaTypeError(ChromiumError):
    """The emulated media type is neither "screen" nor "print"."""

    message = "invalid emulated media type"


class InvalidEvaluationExpressionError(ChromiumError):
    """An evaluation expression returned an exception or undefined."""

    message = "invalid evaluation expression"


class RpccMessageTooLargeError(ChromiumError):
    """A message received from the browser is too large."""

    message = "rpcc message too large"


class InvalidHttpStatusCodeError(ChromiumError):
    """The main page returned a status code the caller asked to fail on."""

    message = "invalid HTTP status code"


class InvalidResourceHttpStatusCodeError(ChromiumError):
    """A resource returned a status code the caller asked to fail on."""

    message = "invalid resource HTTP status code"


class ConsoleExceptionsError(ChromiumError):
    """Exceptions were thrown in the browser console."""

    message = "console exceptions"


class LoadingFailedError(ChromiumError):
    """The main page failed to load."""

    message = "loading failed"


class ResourceLoadingFailedError(ChromiumError):
    """One or more resources failed to load."""

    message = "resource loading failed"


class OmitBackgroundWithoutPrintBackgroundError(ChromiumError):
    """omit_background is set without print_background."""

    message = "omit background without print background"


class InvalidPrinterSettingsError(ChromiumError):
    """The PDF options hold one or more aberrant values."""

    message = "invalid printer settings"


class PageRangesSyntaxError(ChromiumError):
    """The page ranges of the PDF options are malformed."""

    message = "page ranges syntax error"


@dataclass
class Cookie:
    """A cookie to put in the browser's cookie jar."""

    name: str
    value: str
    domain: str
    path: str = ""
    secure: bool = False
    http_only: bool = False
    same_site: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the cookie, leaving out empty optional entries."""
        data: dict[str, Any] = {"name": self.name, "value": self.value, "domain": self.domain}
        if self.path:
            data["path"] = self.path
        if self.secure:
            data["secure"] = True
        if self.http_only:
            data["httpOnly"] = True
        if self.same_site:
            data["sameSite"] = self.same_site
        return data


@dataclass
class ExtraHttpHeader:
    """An extra HTTP header, sent to every request or only to those matching its scope."""

    name: str
    value: str
    scope: re.Pattern[str] | None = None

    def applies_to(self, url: str) -> bool:
        """Whether the header must be set for a request to ``url``."""
        if self.scope is None:
            return True
        return self.scope.search(url) is not None


def _default_fail_codes() -> list[int]:
    return [499, 599]


@dataclass
class Options:
    """Options common to every conversion. ``wait_delay`` is in seconds."""

    skip_network_idle_event: bool = True
    fail_on_http_status_codes: list[int] | None = field(default_factory=_default_fail_codes)
    fail_on_resource_http_status_codes: list[int] | None = None
    fail_on_resource_loading_failed: bool = False
    fail_on_console_exceptions: bool = False
    wait_delay: float = 0.0
    wait_window_status: str = ""
    wait_for_expression: str = ""
    cookies: list[Cookie] | None = None
    user_agent: str = ""
    extra_http_headers: list[ExtraHttpHeader] | None = None
    emulated_media_type: str = ""
    omit_background: bool = False


@dataclass
class PdfOptions(Options):
    """Options of an HTML to PDF conversion. Sizes and margins are in inches."""

    landscape: bool = False
    print_background: bool = False
    scale: float = 1.0
    single_page: bool = False
    paper_width: float = 8.5
    paper_height: float = 11.0
    margin_top: float = 0.39
    margin_bottom: float = 0.39
    margin_left: float = 0.39
    margin_right: float = 0.39
    page_ranges: str = ""
    header_template: str = DEFAULT_TEMPLATE
    footer_template: str = DEFAULT_TEMPLATE
    prefer_css_page_size: bool = False
    generate_document_outline: bool = False
    generate_tagged_pdf: bool = False


@dataclass
class ScreenshotOptions(Options):
    """Options of a screenshot. Width and height are in pixels."""

    width: int = 800
    height: int = 600
    clip: bool = False
    format: str = "png"
    quality: int = 100
    optimize_for_speed: bool = False
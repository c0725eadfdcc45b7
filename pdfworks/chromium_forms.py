"""Build Chromium conversion options from submitted form fields."""

from __future__ import annotations

import json
import re
from dataclasses import fields
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from pdfworks.chromium_options import (
    Cookie,
    ExtraHttpHeader,
    Options,
    PdfOptions,
    ScreenshotOptions,
)

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "\u00b5s": 1e-6,
    "\u03bcs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)([^\d.]*)")

_INCHES = re.compile(r"([+-]?(?:\d+\.?\d*|\.\d+))(in|pt|px|pc|mm|cm)?")
_UNITS_PER_INCH = {None: 1.0, "in": 1.0, "pt": 72.0, "px": 96.0, "pc": 6.0, "mm": 25.4, "cm": 2.54}

_INTEGER = re.compile(r"[+-]?\d+")

_SAME_SITE_VALUES = ("Strict", "Lax", "None")
_MEDIA_TYPES = ("screen", "print")
_SCREENSHOT_FORMATS = ("png", "jpeg", "webp")


class FormError(ValueError):
    """One or more form fields are invalid; ``errors`` maps each field to its problem."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()))


class HttpError(Exception):
    """An error meant to be shown to the client with an HTTP status code."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(message)


def parse_bool(value: str, default: bool) -> bool:
    """Parse a boolean form value; an empty value gives ``default``."""
    if value == "":
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f'strconv.ParseBool: parsing "{value}": invalid syntax')


def parse_duration(value: str) -> float:
    """Parse a duration such as ``1.5s`` or ``2h45m`` into seconds."""
    invalid = ValueError(f'time: invalid duration "{value}"')
    rest = value
    sign = 1.0
    if rest and rest[0] in "+-":
        sign = -1.0 if rest[0] == "-" else 1.0
        rest = rest[1:]
    if rest == "0":
        return 0.0
    if not rest:
        raise invalid

    total = 0.0
    position = 0
    while position < len(rest):
        match = _DURATION_COMPONENT.match(rest, position)
        if match is None:
            raise invalid
        number, unit = match.groups()
        if not unit:
            raise ValueError(f'time: missing unit in duration "{value}"')
        if unit not in _DURATION_UNITS:
            raise ValueError(f'time: unknown unit "{unit}" in duration "{value}"')
        total += float(number) * _DURATION_UNITS[unit]
        position = match.end()
    return sign * total


def _parse_int(value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise ValueError(f'strconv.Atoi: parsing "{value}": invalid syntax')
    return int(value)


def _parse_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f'strconv.ParseFloat: parsing "{value}": invalid syntax') from None


def _parse_inches(value: str) -> float:
    match = _INCHES.fullmatch(value)
    if match is None:
        raise ValueError(f"'{value}' is not a valid size")
    number, unit = match.groups()
    return float(number) / _UNITS_PER_INCH[unit]


def parse_status_codes(value: str, default: list[int] | None) -> list[int] | None:
    """Parse a JSON array of HTTP status codes; an empty value gives ``default``."""
    if value == "":
        return list(default) if default is not None else None
    try:
        codes = json.loads(value)
    except json.JSONDecodeError as error:
        raise ValueError(f"unmarshal status codes: {error}") from error
    if codes is None:
        return None
    if not isinstance(codes, list) or not all(
        isinstance(code, int) and not isinstance(code, bool) for code in codes
    ):
        raise ValueError("unmarshal status codes: expected an array of integers")
    return codes


def _cookie_field(entry: Mapping[str, Any], name: str) -> Any:
    lowered = name.lower()
    for key, item in entry.items():
        if key.lower() == lowered:
            return item
    return None


def _cookie_from_json(entry: Any) -> Cookie:
    if not isinstance(entry, dict):
        raise ValueError("unmarshal cookies: expected an array of objects")
    values: dict[str, Any] = {}
    for attribute, key, kind in (
        ("name", "name", str),
        ("value", "value", str),
        ("domain", "domain", str),
        ("path", "path", str),
        ("secure", "secure", bool),
        ("http_only", "httpOnly", bool),
        ("same_site", "sameSite", str),
    ):
        item = _cookie_field(entry, key)
        if item is None:
            continue
        if not isinstance(item, kind):
            raise ValueError(f"unmarshal cookies: '{key}' has the wrong type")
        values[attribute] = item
    same_site = values.get("same_site", "")
    if same_site and same_site not in _SAME_SITE_VALUES:
        raise ValueError(f"unmarshal cookies: unknown sameSite value '{same_site}'")
    return Cookie(
        name=values.get("name", ""),
        value=values.get("value", ""),
        domain=values.get("domain", ""),
        path=values.get("path", ""),
        secure=values.get("secure", False),
        http_only=values.get("http_only", False),
        same_site=same_site,
    )


def parse_cookies(value: str) -> list[Cookie] | None:
    """Parse a JSON array of cookies; each needs a name, a value and a domain."""
    if value == "":
        return None
    try:
        entries = json.loads(value)
    except json.JSONDecodeError as error:
        raise ValueError(f"unmarshal cookies: {error}") from error
    if entries is None:
        return None
    if not isinstance(entries, list):
        raise ValueError("unmarshal cookies: expected an array of objects")
    cookies = [_cookie_from_json(entry) for entry in entries]
    problems = [
        f"cookie {index} must have its name, value and domain set"
        for index, cookie in enumerate(cookies)
        if not (cookie.name.strip() and cookie.value.strip() and cookie.domain.strip())
    ]
    if problems:
        raise ValueError("; ".join(problems))
    return cookies


def parse_extra_http_headers(value: str) -> list[ExtraHttpHeader] | None:
    """Parse a JSON object of headers; a ``scope=<regex>`` token limits a header to matching URLs."""
    if value == "":
        return None
    try:
        headers = json.loads(value)
    except json.JSONDecodeError as error:
        raise ValueError(f"unmarshal extraHttpHeaders: {error}") from error
    if not isinstance(headers, dict) or not all(isinstance(item, str) for item in headers.values()):
        raise ValueError("unmarshal extraHttpHeaders: expected an object of strings")

    problems: list[str] = []
    result: list[ExtraHttpHeader] = []
    for name, raw in headers.items():
        scope = ""
        value_tokens: list[str] = []
        invalid_scope = False
        for token in raw.split(";"):
            if token.strip().lower().startswith("scope"):
                parts = "".join(token.split()).split("=", 1)
                if len(parts) == 2 and parts[0].lower() == "scope" and parts[1]:
                    scope = parts[1]
                else:
                    problems.append(f"invalid scope '{scope}' for header '{name}'")
                    invalid_scope = True
                    break
            elif token:
                value_tokens.append(token)
        if invalid_scope:
            continue

        pattern = None
        if scope:
            try:
                pattern = re.compile(scope)
            except re.error as error:
                problems.append(f"invalid scope regex pattern for header '{name}': {error}")
                continue
        result.append(ExtraHttpHeader(name=name, value="; ".join(value_tokens), scope=pattern))

    if problems:
        raise ValueError("; ".join(problems))
    return result


def parse_emulated_media_type(value: str) -> str:
    """Accept ``screen``, ``print`` or an empty value."""
    if value == "":
        return ""
    if value not in _MEDIA_TYPES:
        raise ValueError("wrong value, expected either 'screen', 'print' or empty")
    return value


def parse_screenshot_format(value: str) -> str:
    """Accept ``png``, ``jpeg`` or ``webp``; an empty value gives ``png``."""
    if value == "":
        return ScreenshotOptions().format
    if value not in _SCREENSHOT_FORMATS:
        raise ValueError("wrong value, expected either 'png', 'jpeg' or 'webp'")
    return value


def parse_screenshot_quality(value: str) -> int:
    """Accept an integer in [0, 100]; an empty value gives the default quality."""
    if value == "":
        return ScreenshotOptions().quality
    quality = _parse_int(value)
    if quality < 0:
        raise ValueError("value is negative")
    if quality > 100:
        raise ValueError("value is superior to 100")
    return quality


class _FormReader:
    def __init__(self, form: Mapping[str, str], files: Mapping[str, str] | None = None) -> None:
        self.form = form
        self.files = files or {}
        self.errors: dict[str, str] = {}

    def raw(self, key: str) -> str:
        return self.form.get(key) or ""

    def custom(self, key: str, parse: Callable[[str], T]) -> T:
        value = self.raw(key)
        try:
            return parse(value)
        except ValueError as error:
            self.errors[key] = f"form field '{key}' is invalid (got '{value}', resulting to {error})"
            return None  # type: ignore[return-value]

    def boolean(self, key: str, default: bool) -> bool:
        return self.custom(key, lambda value: parse_bool(value, default))

    def string(self, key: str, default: str) -> str:
        return self.raw(key) or default

    def _or_default(self, key: str, parse: Callable[[str], T], default: T) -> T:
        return self.custom(key, lambda value: parse(value) if value else default)

    def duration(self, key: str, default: float) -> float:
        return self._or_default(key, parse_duration, default)

    def integer(self, key: str, default: int) -> int:
        return self._or_default(key, _parse_int, default)

    def number(self, key: str, default: float) -> float:
        return self._or_default(key, _parse_float, default)

    def inches(self, key: str, default: float) -> float:
        return self._or_default(key, _parse_inches, default)

    def content(self, filename: str, default: str) -> str:
        path = self.files.get(filename)
        if path is None:
            return default
        try:
            return Path(path).read_text()
        except OSError as error:
            self.errors[filename] = f"read file '{filename}': {error}"
            return default

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise FormError(self.errors)


def _read_options(reader: _FormReader) -> Options:
    defaults = Options()
    return Options(
        skip_network_idle_event=reader.boolean("skipNetworkIdleEvent", defaults.skip_network_idle_event),
        fail_on_http_status_codes=reader.custom(
            "failOnHttpStatusCodes",
            lambda value: parse_status_codes(value, defaults.fail_on_http_status_codes),
        ),
        fail_on_resource_http_status_codes=reader.custom(
            "failOnResourceHttpStatusCodes",
            lambda value: parse_status_codes(value, defaults.fail_on_resource_http_status_codes),
        ),
        fail_on_resource_loading_failed=reader.boolean(
            "failOnResourceLoadingFailed", defaults.fail_on_resource_loading_failed
        ),
        fail_on_console_exceptions=reader.boolean(
            "failOnConsoleExceptions", defaults.fail_on_console_exceptions
        ),
        wait_delay=reader.duration("waitDelay", defaults.wait_delay),
        wait_window_status=reader.string("waitWindowStatus", defaults.wait_window_status),
        wait_for_expression=reader.string("waitForExpression", defaults.wait_for_expression),
        cookies=reader.custom("cookies", parse_cookies),
        user_agent=reader.string("userAgent", defaults.user_agent),
        extra_http_headers=reader.custom("extraHttpHeaders", parse_extra_http_headers),
        emulated_media_type=reader.custom("emulatedMediaType", parse_emulated_media_type),
        omit_background=reader.boolean("omitBackground", defaults.omit_background),
    )


def _common(options: Options) -> dict[str, Any]:
    return {item.name: getattr(options, item.name) for item in fields(Options)}


def chromium_options_from_form(form: Mapping[str, str]) -> Options:
    """Build the common options from form fields, falling back to defaults."""
    reader = _FormReader(form)
    options = _read_options(reader)
    reader.raise_if_invalid()
    return options


def pdf_options_from_form(
    form: Mapping[str, str], files: Mapping[str, str] | None = None
) -> PdfOptions:
    """Build PDF options from form fields and the uploaded header/footer files."""
    reader = _FormReader(form, files)
    options = _read_options(reader)
    defaults = PdfOptions()
    pdf_options = PdfOptions(
        **_common(options),
        landscape=reader.boolean("landscape", defaults.landscape),
        print_background=reader.boolean("printBackground", defaults.print_background),
        scale=reader.number("scale", defaults.scale),
        single_page=reader.boolean("singlePage", defaults.single_page),
        paper_width=reader.inches("paperWidth", defaults.paper_width),
        paper_height=reader.inches("paperHeight", defaults.paper_height),
        margin_top=reader.inches("marginTop", defaults.margin_top),
        margin_bottom=reader.inches("marginBottom", defaults.margin_bottom),
        margin_left=reader.inches("marginLeft", defaults.margin_left),
        margin_right=reader.inches("marginRight", defaults.margin_right),
        page_ranges=reader.string("nativePageRanges", defaults.page_ranges),
        header_template=reader.content("header.html", defaults.header_template),
        footer_template=reader.content("footer.html", defaults.footer_template),
        prefer_css_page_size=reader.boolean("preferCssPageSize", defaults.prefer_css_page_size),
        generate_document_outline=reader.boolean(
            "generateDocumentOutline", defaults.generate_document_outline
        ),
        generate_tagged_pdf=reader.boolean("generateTaggedPdf", defaults.generate_tagged_pdf),
    )
    reader.raise_if_invalid()
    return pdf_options


def screenshot_options_from_form(form: Mapping[str, str]) -> ScreenshotOptions:
    """Build screenshot options from form fields, falling back to defaults."""
    reader = _FormReader(form)
    options = _read_options(reader)
    defaults = ScreenshotOptions()
    screenshot_options = ScreenshotOptions(
        **_common(options),
        width=reader.integer("width", defaults.width),
        height=reader.integer("height", defaults.height),
        clip=reader.boolean("clip", defaults.clip),
        format=reader.custom("format", parse_screenshot_format),
        quality=reader.custom("quality", parse_screenshot_quality),
        optimize_for_speed=reader.boolean("optimizeForSpeed", defaults.optimize_for_speed),
    )
    reader.raise_if_invalid()
    return screenshot_options
import re

import pytest

from pdfworks.chromium_options import (
    DEFAULT_TEMPLATE,
    ChromiumError,
    ConsoleExceptionsError,
    Cookie,
    ExtraHttpHeader,
    InvalidHttpStatusCodeError,
    InvalidPrinterSettingsError,
    Options,
    PageRangesSyntaxError,
    PdfOptions,
    ResourceLoadingFailedError,
    ScreenshotOptions,
)


def test_default_options():
    options = Options()
    assert options.skip_network_idle_event is True
    assert options.fail_on_http_status_codes == [499, 599]
    assert options.fail_on_resource_http_status_codes is None
    assert options.cookies is None
    assert options.wait_delay == 0


def test_default_status_codes_are_not_shared():
    first = Options()
    first.fail_on_http_status_codes.append(404)
    assert Options().fail_on_http_status_codes == [499, 599]


def test_default_pdf_options():
    options = PdfOptions()
    assert options.paper_width == 8.5
    assert options.paper_height == 11
    assert options.margin_top == 0.39
    assert options.scale == 1.0
    assert options.header_template == "<html><head></head><body></body></html>"
    assert options.footer_template == DEFAULT_TEMPLATE
    assert options.fail_on_http_status_codes == [499, 599]


def test_default_screenshot_options():
    options = ScreenshotOptions()
    assert (options.width, options.height) == (800, 600)
    assert options.format == "png"
    assert options.quality == 100
    assert options.skip_network_idle_event is True


def test_cookie_to_dict_omits_empty_optional_fields():
    cookie = Cookie(name="session", value="token", domain="example.com")
    assert cookie.to_dict() == {"name": "session", "value": "token", "domain": "example.com"}


def test_cookie_to_dict_with_all_fields():
    cookie = Cookie("session", "token", "example.com", "/", True, True, "Lax")
    data = cookie.to_dict()
    assert data["httpOnly"] is True
    assert data["secure"] is True
    assert data["path"] == "/"
    assert data["sameSite"] == "Lax"


def test_unscoped_header_applies_everywhere():
    header = ExtraHttpHeader("X-Foo", "bar")
    assert header.applies_to("https://example.com/a")
    assert header.applies_to("file:///tmp/index.html")


def test_scoped_header_applies_only_to_matching_urls():
    header = ExtraHttpHeader("X-Foo", "bar", re.compile(r"example\.com"))
    assert header.applies_to("https://www.example.com/page")
    assert not header.applies_to("https://example.org/page")


def test_error_messages():
    assert str(InvalidHttpStatusCodeError()) == "invalid HTTP status code"
    assert str(InvalidHttpStatusCodeError("404: Not Found")) == "404: Not Found: invalid HTTP status code"
    assert str(ResourceLoadingFailedError()) == "resource loading failed"
    assert str(PageRangesSyntaxError()) == "page ranges syntax error"


def test_errors_share_a_base():
    with pytest.raises(ChromiumError):
        raise InvalidPrinterSettingsError()
    error = ConsoleExceptionsError("boom")
    assert error.detail == "boom"
    assert isinstance(error, ChromiumError)
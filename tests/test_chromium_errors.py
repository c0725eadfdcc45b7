import pytest

from pdfworks.chromium_errors import handle_chromium_error, handle_pdf_error
from pdfworks.chromium_forms import HttpError
from pdfworks.chromium_options import (
    ConsoleExceptionsError,
    InvalidEvaluationExpressionError,
    InvalidHttpStatusCodeError,
    InvalidPrinterSettingsError,
    InvalidResourceHttpStatusCodeError,
    LoadingFailedError,
    OmitBackgroundWithoutPrintBackgroundError,
    Options,
    PageRangesSyntaxError,
    PdfOptions,
    ResourceLoadingFailedError,
    RpccMessageTooLargeError,
)


def test_no_error_gives_none():
    assert handle_chromium_error(None, Options()) is None
    assert handle_pdf_error(None, PdfOptions()) is None


def test_evaluation_error_without_expression_is_unchanged():
    error = InvalidEvaluationExpressionError("evaluate")
    assert handle_chromium_error(error, Options()) is error


def test_evaluation_error_with_expression_is_bad_request():
    error = InvalidEvaluationExpressionError("evaluate")
    result = handle_chromium_error(error, Options(wait_for_expression="window.ready"))
    assert isinstance(result, HttpError)
    assert result.status == 400
    assert "'window.ready' (waitForExpression)" in result.message
    assert result.__cause__ is error


def test_main_page_status_code():
    error = InvalidHttpStatusCodeError("404: Not Found")
    result = handle_chromium_error(error, Options())
    assert result.status == 409
    assert result.message == "Invalid HTTP status code from the main page: 404: Not Found"


def test_resource_status_code():
    error = InvalidResourceHttpStatusCodeError("http://localhost/a.png - 404: Not Found")
    result = handle_chromium_error(error, Options())
    assert result.status == 409
    assert result.message.startswith("Invalid HTTP status code from resources:\n")
    assert result.message.endswith("http://localhost/a.png - 404: Not Found")


def test_console_exceptions():
    error = ConsoleExceptionsError("\nboom")
    result = handle_chromium_error(error, Options())
    assert result.status == 409
    assert result.message.startswith("Chromium console exceptions:\n")
    assert "console exceptions" not in result.message[len("Chromium console exceptions:"):]


def test_loading_failed_is_bad_request():
    error = LoadingFailedError("net::ERR_CONNECTION_REFUSED")
    result = handle_chromium_error(error, Options())
    assert result.status == 400
    assert result.message == f"Chromium returned {error}"


def test_resource_loading_failed():
    error = ResourceLoadingFailedError("resource Image: net::ERR_FILE_NOT_FOUND")
    result = handle_chromium_error(error, Options())
    assert result.status == 409
    assert result.message == "Chromium failed to load resources: resource Image: net::ERR_FILE_NOT_FOUND"


def test_other_errors_pass_through():
    error = RpccMessageTooLargeError()
    assert handle_chromium_error(error, Options()) is error
    assert handle_pdf_error(error, PdfOptions()) is error


def test_omit_background_error():
    error = OmitBackgroundWithoutPrintBackgroundError("validate omit background")
    result = handle_pdf_error(error, PdfOptions())
    assert result.status == 400
    assert result.message == "omitBackground requires printBackground set to true"


def test_invalid_printer_settings():
    error = InvalidPrinterSettingsError()
    result = handle_pdf_error(error, PdfOptions())
    assert result.status == 400
    assert "aberrant form values" in result.message


def test_page_ranges_error_names_ranges():
    error = PageRangesSyntaxError()
    result = handle_pdf_error(error, PdfOptions(page_ranges="1-a"))
    assert result.status == 400
    assert "'1-a' (nativePageRanges)" in result.message


@pytest.mark.parametrize(
    "error",
    [InvalidHttpStatusCodeError("500: x"), LoadingFailedError("net::ERR_NAME_NOT_RESOLVED")],
)
def test_pdf_handler_applies_common_mapping(error):
    result = handle_pdf_error(error, PdfOptions())
    assert isinstance(result, HttpError)
    assert result.__cause__ is error
"""Map Chromium conversion errors to errors meant for HTTP clients."""

from __future__ import annotations

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
)

BAD_REQUEST = 400
CONFLICT = 409


def _client_error(status: int, message: str, cause: BaseException) -> HttpError:
    error = HttpError(status, message)
    error.__cause__ = cause
    return error


def _without(error: BaseException, suffix: str) -> str:
    return str(error).replace(suffix, "")


def handle_chromium_error(error: BaseException | None, options: Options) -> BaseException | None:
    """Return the error to raise for a failed conversion, or None if there was none.

    Errors the client can act upon become an :class:`HttpError` whose cause is
    the original error; any other error is returned unchanged.
    """
    if error is None:
        return None

    if isinstance(error, InvalidEvaluationExpressionError):
        if not options.wait_for_expression:
            # Only a wait expression from the client should lead to a 400.
            return error
        return _client_error(
            BAD_REQUEST,
            f"The expression '{options.wait_for_expression}' (waitForExpression) "
            "returned an exception or undefined",
            error,
        )

    if isinstance(error, InvalidHttpStatusCodeError):
        detail = _without(error, f": {InvalidHttpStatusCodeError.message}")
        return _client_error(
            CONFLICT, f"Invalid HTTP status code from the main page: {detail}", error
        )

    if isinstance(error, InvalidResourceHttpStatusCodeError):
        detail = _without(error, f": {InvalidResourceHttpStatusCodeError.message}")
        return _client_error(
            CONFLICT, f"Invalid HTTP status code from resources:\n{detail}", error
        )

    if isinstance(error, ConsoleExceptionsError):
        detail = _without(error, ConsoleExceptionsError.message)
        return _client_error(CONFLICT, f"Chromium console exceptions:\n{detail}", error)

    if isinstance(error, LoadingFailedError):
        return _client_error(BAD_REQUEST, f"Chromium returned {error}", error)

    if isinstance(error, ResourceLoadingFailedError):
        detail = _without(error, f": {ResourceLoadingFailedError.message}")
        return _client_error(CONFLICT, f"Chromium failed to load resources: {detail}", error)

    return error


def handle_pdf_error(error: BaseException | None, options: PdfOptions) -> BaseException | None:
    """Like :func:`handle_chromium_error`, with the errors specific to PDF printing."""
    handled = handle_chromium_error(error, options)
    if handled is None or isinstance(handled, HttpError):
        return handled

    if isinstance(handled, OmitBackgroundWithoutPrintBackgroundError):
        return _client_error(
            BAD_REQUEST, "omitBackground requires printBackground set to true", handled
        )

    if isinstance(handled, InvalidPrinterSettingsError):
        return _client_error(
            BAD_REQUEST,
            "Chromium does not handle the provided settings; please check for aberrant form values",
            handled,
        )

    if isinstance(handled, PageRangesSyntaxError):
        return _client_error(
            BAD_REQUEST,
            f"Chromium does not handle the page ranges '{options.page_ranges}' (nativePageRanges)",
            handled,
        )

    return handled
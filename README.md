# pdfworks

Building blocks for a service that turns web pages into PDF files and
screenshots with Chromium: the conversion options, the parsing of submitted
form fields into those options, the mapping of conversion failures to HTTP
errors, and the service's logging setup. It has no dependencies outside the
standard library.

## Modules

- **`pdfworks.chromium_options`**: the option dataclasses `Options`,
  `PdfOptions` and `ScreenshotOptions`, with their defaults. Paper sizes and
  margins are in inches, `wait_delay` is in seconds. Also `Cookie`
  (`to_dict()` gives its JSON form), `ExtraHttpHeader` (`applies_to(url)`
  checks its optional regex scope), and the `ChromiumError` family:
  `InvalidHttpStatusCodeError`, `LoadingFailedError`,
  `ConsoleExceptionsError`, `PageRangesSyntaxError` and the rest.
- **`pdfworks.chromium_forms`**: `chromium_options_from_form`,
  `pdf_options_from_form` and `screenshot_options_from_form` build options from
  a mapping of form fields. Empty or missing fields fall back to the defaults.
  All invalid fields are collected into one `FormError`, whose `errors` maps
  each field name to its problem. The single-field parsers are public too:
  `parse_bool`, `parse_duration` (for example `"1.5s"` or `"2h45m"`, giving
  seconds), `parse_status_codes`, `parse_cookies`, `parse_extra_http_headers`,
  `parse_emulated_media_type`, `parse_screenshot_format` and
  `parse_screenshot_quality`.
- **`pdfworks.chromium_errors`**: `handle_chromium_error` and
  `handle_pdf_error` turn errors the client can act on into an `HttpError`
  with a `status` (400 or 409) and a `message`. The original error is kept as
  `__cause__`. Any other error is returned unchanged.
- **`pdfworks.logs`**: `parse_log_level`, `level_to_color`, `gcp_severity`,
  the `Color` enum, `JsonFormatter` and `TextFormatter`, and `new_formatter`.
  `new_formatter` picks a formatter from a format name (`auto`, `json`,
  `text`), whether the output is a terminal, Google Cloud field names and a
  prefix for extra fields. `LoggingSettings` checks its level and format with
  `validate()`. Its `logger(name)` returns loggers that all write through one
  shared handler.

Form sizes such as `paperWidth` accept a unit: `in`, `pt`, `px`, `pc`, `mm`
or `cm`. With no unit the value is taken as inches.

An extra HTTP header value may carry a `scope=<regex>` token. The header is
then sent only to URLs that match the regex.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from pdfworks.chromium_errors import handle_pdf_error
from pdfworks.chromium_forms import FormError, pdf_options_from_form
from pdfworks.chromium_options import InvalidHttpStatusCodeError
from pdfworks.logs import LoggingSettings

form = {
    "paperWidth": "210mm",
    "landscape": "true",
    "waitDelay": "1.5s",
    "cookies": '[{"name": "session", "value": "token", "domain": "example.com"}]',
    "extraHttpHeaders": '{"X-Trace": "on;scope=.*\\\\.example\\\\.com"}',
}
options = pdf_options_from_form(form)
print(options.paper_width, options.landscape, options.wait_delay)  # 8.267... True 1.5

try:
    pdf_options_from_form({"scale": "big"})
except FormError as error:
    print(error.errors["scale"])

failure = handle_pdf_error(InvalidHttpStatusCodeError("404: Not Found"), options)
print(failure.status, failure.message)
# 409 Invalid HTTP status code from the main page: 404: Not Found

settings = LoggingSettings(level="debug", format="json", fields_prefix="app")
settings.validate()
log = settings.logger("chromium")
log.info("conversion done", extra={"fields": {"pages": 3}})
```

`pdf_options_from_form` also takes a second mapping, from uploaded file names
to paths on disk. From it, `header.html` and `footer.html` are read as the
header and footer templates.

## What this package does not do

This package does not start or drive a browser, and it does not print or
capture anything. It holds no LibreOffice or ExifTool engines, offers no HTTP
server or routes, and provides no command-line program. It supplies the
options, validation, error mapping and logging that such a service is built
on.
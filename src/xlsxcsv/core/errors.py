class XlsxCsvError(Exception):
    """Base error for all user-facing xlsxcsv exceptions."""


class ConfigurationError(XlsxCsvError):
    """Raised when conversion options are invalid or incomplete."""


class InvalidPackageError(XlsxCsvError):
    """Raised when the input is not a readable xlsx package."""


class MissingPartError(XlsxCsvError):
    """Raised when a required package part is absent."""


class MalformedXmlError(XlsxCsvError):
    """Raised when a package part holds unparseable or truncated XML."""


class EmptyWorkbookError(XlsxCsvError):
    """Raised when the workbook declares no resolvable sheets."""


class NamedSheetNotFoundError(XlsxCsvError):
    """Raised when a sheet requested by name does not exist."""


class SheetIndexOutOfRangeError(XlsxCsvError):
    """Raised when a 1-based sheet index falls outside the catalog."""


class NoMatchError(XlsxCsvError):
    """Raised when sheet selection filters leave nothing to convert."""


class SinkWriteError(XlsxCsvError):
    """Raised when CSV output cannot be written."""

    def __init__(self, message: str, *, broken_pipe: bool = False) -> None:
        super().__init__(message)
        self.broken_pipe = broken_pipe

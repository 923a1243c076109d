"""
Error taxonomy for xivextract.

Every failure the extractor can report derives from ExtractError and carries
a message suitable for printing to the user as-is. The CLI is the only place
these are turned into an exit status.
"""

import traceback
from typing import Optional


class ExtractError(Exception):
    """Base class for all extraction failures."""

    message = "An unknown error occurred"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class GameNotFound(ExtractError):
    """No usable game installation could be located."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        if path:
            message = f'No game installation found at "{path}". Check the "-d" option or the game_path setting.'
        else:
            message = 'No game path found. You can specify the game path by using the "-d" option.'
        super().__init__(message)


class VersionNotFound(ExtractError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"No schema available for game version {version}")


class SheetNotFound(ExtractError):
    def __init__(self, sheet: str):
        self.sheet = sheet
        super().__init__(f"Sheet {sheet} not found")


class RowNotFound(ExtractError):
    def __init__(self, sheet: str, row_id: int):
        self.sheet = sheet
        self.row_id = row_id
        super().__init__(f"Sheet {sheet} has no row {row_id}")


class ColumnNotFound(ExtractError):
    def __init__(self, sheet: str, column: str):
        self.sheet = sheet
        self.column = column
        super().__init__(f"Sheet {sheet} has no column {column}")


class NoIndex(ExtractError):
    """A field used as a row key holds something that is not a number."""

    def __init__(self, sheet: str, column: str):
        self.sheet = sheet
        self.column = column
        super().__init__(f"Column {sheet}::{column} cannot be coerced to a u32")


class UnsupportedSheet(ExtractError):
    """The schema for a sheet is not a flat record."""

    def __init__(self, sheet: str):
        self.sheet = sheet
        super().__init__(f"Unsupported sheet type {sheet}")


class FieldKindMismatch(ExtractError):
    """A decoded value does not carry the kind the schema declares for it."""

    def __init__(self, sheet: str, column: str, expected: str, actual: str):
        self.sheet = sheet
        self.column = column
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Column {sheet}::{column} holds a {actual} value but the schema declares {expected}"
        )


class IconNotFound(ExtractError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f'No icon found at path "{path}"')


class UnsupportedIconFormat(ExtractError):
    def __init__(self, format_tag: int, path: str):
        self.format_tag = format_tag
        self.path = path
        super().__init__(f'Unsupported icon format {format_tag:#06x} at "{path}"')


class JobNotFound(ExtractError):
    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"No class or job with ID {job_id}")


class Unknown(ExtractError):
    """
    Wraps an unexpected lower-level failure.

    When ``capture_trace`` is set the formatted traceback of the exception
    currently being handled is kept in ``trace`` for debug output.
    """

    def __init__(self, cause: Optional[BaseException] = None, capture_trace: bool = False):
        self.cause = cause
        self.trace: Optional[str] = None
        if capture_trace and cause is not None:
            self.trace = "".join(
                traceback.format_exception(type(cause), cause, cause.__traceback__)
            )
        message = "An unknown error occurred"
        if cause is not None and str(cause):
            message = f"{message}: {cause}"
        super().__init__(message)

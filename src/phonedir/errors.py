"""Errors raised while loading the directory spreadsheet.

Each class carries the message shown to end users, whether retrying can help,
and the HTTP status the web layer answers with.
"""

from __future__ import annotations


class DirectoryError(Exception):
    user_message = "Error al cargar el directorio"
    retryable = False
    status_code = 500

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.user_message)
        self.detail = detail or self.user_message


class SourceUnavailableError(DirectoryError):
    """The source file is missing or the server answered 404."""

    user_message = "No se encontró el archivo del directorio interno"
    status_code = 404


class SourceMalformedError(DirectoryError):
    """The payload is not a usable spreadsheet (HTML page, corrupt workbook, no sheets)."""

    user_message = "Error al procesar el directorio"
    status_code = 422


class EmptyDirectoryError(SourceMalformedError):
    user_message = "El directorio está vacío"


class TransientSourceError(DirectoryError):
    """Network failure while fetching the source; the caller may retry."""

    user_message = "Error de conexión al cargar el directorio"
    retryable = True
    status_code = 503


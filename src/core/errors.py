"""Errores del Core.

Por qué un módulo propio:
- Los servicios lanzan estos errores; solo la CLI decide si terminan el proceso.
- `ServerVersionError` cubre fallos de transporte y de parseo, así que quien
  llama no necesita distinguirlos.
"""

from __future__ import annotations


class EcBackupError(Exception):
    """Base error for failures the CLI reports and exits on."""


class PreconditionError(EcBackupError):
    """A required file, path or setting is missing."""


class ServerVersionError(EcBackupError):
    """The server version could not be fetched."""


class VersionParseError(ServerVersionError):
    """The server answered, but the version text has no usable numbers."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Could not parse a MAJOR.MINOR.PATCH version from {text!r}")
        self.text = text


class TransferError(EcBackupError):
    """A request of the user-ACL transfer failed outside any single user."""

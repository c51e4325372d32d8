"""Error types shared by the core, the ports and the API layer."""

from __future__ import annotations


class CidadeAlertaError(Exception):
    """Base class for all errors raised by this package."""


class InvalidCoordinateError(CidadeAlertaError, ValueError):
    """A coordinate is missing, non-numeric or not finite."""


class InvalidDocumentError(CidadeAlertaError, ValueError):
    """A stored document cannot be converted to a Report."""


class AuthenticationError(CidadeAlertaError):
    """The bearer credential is missing, malformed or expired."""


class ForbiddenError(CidadeAlertaError):
    """The caller is authenticated but lacks authority privileges."""


class NotFoundError(CidadeAlertaError):
    """A report or user does not exist."""

"""Sorteos, ganadores, formularios y cupones."""

from .service import SweepstakesService, SweepstakesValidationError
from .sheets import GoogleSheetsClient, SheetsAppendError, SheetsNotConfiguredError

__all__ = [
    "SweepstakesService",
    "SweepstakesValidationError",
    "GoogleSheetsClient",
    "SheetsAppendError",
    "SheetsNotConfiguredError",
]

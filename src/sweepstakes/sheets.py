"""
Espejo de participaciones y ganadores en Google Sheets.

Se autentica con una cuenta de servicio (google-auth) y agrega filas con
``spreadsheets.values.append`` en modo ``RAW``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from config.settings import SHEETS_CONFIG

from src.utils.logger import get_logger

SHEETS_SCOPES = ("https://www.googleapis.com/auth/spreadsheets",)
SHEETS_APPEND_URL = (
    "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/{range}:append"
)
TOKEN_URI = "https://oauth2.googleapis.com/token"


class SheetsNotConfiguredError(RuntimeError):
    """Faltan credenciales de la cuenta de servicio."""


class SheetsAppendError(RuntimeError):
    """Google Sheets rechazó o no respondió la escritura."""


def unescape_private_key(key: str) -> str:
    """Las claves en variables de entorno suelen llegar con ``\\n`` literales."""
    return key.replace("\\n", "\n")


class GoogleSheetsClient:
    def __init__(
        self,
        client_email: Optional[str] = None,
        private_key: Optional[str] = None,
        *,
        session_factory: Optional[Callable[[], Any]] = None,
        timeout: float = 10.0,
        logger_factory=None,
    ) -> None:
        self.client_email = client_email
        self.private_key = private_key
        self.timeout = timeout
        self._session_factory = session_factory
        self._session = None
        self.logger = (logger_factory or get_logger()).create_module_logger("sweepstakes.sheets")

    @classmethod
    def from_config(cls, config=None, **kwargs) -> "GoogleSheetsClient":
        cfg = config or SHEETS_CONFIG
        return cls(cfg.get("client_email"), cfg.get("private_key"), **kwargs)

    @property
    def configured(self) -> bool:
        return bool(self._session_factory or (self.client_email and self.private_key))

    def _build_session(self) -> AuthorizedSession:
        if not (self.client_email and self.private_key):
            raise SheetsNotConfiguredError("Google service account credentials are missing")
        credentials = service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": self.client_email,
                "private_key": unescape_private_key(self.private_key),
                "token_uri": TOKEN_URI,
            },
            scopes=SHEETS_SCOPES,
        )
        return AuthorizedSession(credentials)

    def _get_session(self):
        if self._session is None:
            self._session = (
                self._session_factory() if self._session_factory else self._build_session()
            )
        return self._session

    def append_row(self, sheet_id: Optional[str], cell_range: str, values: Sequence[Any]) -> None:
        """
        Agrega una fila al final de ``cell_range``.

        Raises:
            SheetsNotConfiguredError: sin credenciales o sin hoja.
            SheetsAppendError: si la API devuelve error o no responde.
        """
        if not sheet_id:
            raise SheetsNotConfiguredError("spreadsheet id is missing")
        url = SHEETS_APPEND_URL.format(sheet_id=sheet_id, range=quote(cell_range, safe="!:"))
        try:
            session = self._get_session()
            response = session.post(
                url,
                params={"valueInputOption": "RAW"},
                json={"values": [list(values)]},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            self.logger.error(
                {
                    "event": "sweepstakes.sheets.append_failed",
                    "range": cell_range,
                    "error": str(exc),
                }
            )
            raise SheetsAppendError(str(exc)) from exc
        except (GoogleAuthError, ValueError) as exc:
            # malformed private key or token refresh failure
            self.logger.error(
                {"event": "sweepstakes.sheets.auth_failed", "error": str(exc)}
            )
            raise SheetsAppendError(str(exc)) from exc

        self.logger.debug({"event": "sweepstakes.sheets.appended", "range": cell_range})

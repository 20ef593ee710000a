# src/sweepstakes/service.py
# Sorteos, ganadores, formularios y cupones
# =========================================

"""
Reglas de negocio de las promociones.

Todo se persiste en la base de datos; cuando Google Sheets está configurado
las participaciones y los ganadores también se copian a su hoja. La copia a
Sheets ocurre dentro de la transacción: si falla, no queda registro local.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from config.settings import SHEETS_CONFIG

from src.storage import Coupon, DatabaseManager, FormEntry, SweepstakesEntry, VideoEntry, Winner
from src.utils.datetime_utils import isoformat_utc, sweepstakes_week_number, utc_now
from src.utils.logger import get_logger

from .sheets import GoogleSheetsClient

COUPON_ONLY_PACKAGE = "coupon-only"


class SweepstakesValidationError(ValueError):
    """Datos incompletos o inválidos en una participación."""


class SweepstakesService:
    def __init__(
        self,
        database_manager: DatabaseManager,
        *,
        sheets_client: Optional[GoogleSheetsClient] = None,
        sheets_config: Optional[Mapping[str, Any]] = None,
        clock: Callable[[], datetime] = utc_now,
        logger_factory=None,
    ) -> None:
        self.db = database_manager
        self.sheets = sheets_client
        self.sheets_config: Dict[str, Any] = {**SHEETS_CONFIG, **(sheets_config or {})}
        self.clock = clock
        self.logger = (logger_factory or get_logger()).create_module_logger("sweepstakes")

    def _mirror(self, sheet_key: str, range_key: str, values: List[Any]) -> bool:
        sheet_id = self.sheets_config.get(sheet_key)
        if self.sheets is None or not self.sheets.configured or not sheet_id:
            return False
        self.sheets.append_row(sheet_id, self.sheets_config[range_key], values)
        return True

    # Participaciones
    # ===============

    def add_entry(self, name: Optional[str], email: Optional[str]) -> Dict[str, Any]:
        """
        Registra una participación (nombre + email).

        Raises:
            SweepstakesValidationError: si falta algún campo.
            SheetsAppendError: si la copia a Google Sheets falla.
        """
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            raise SweepstakesValidationError("Missing fields")

        now = self.clock()
        with self.db.get_session() as session:
            session.add(SweepstakesEntry(name=name, email=email, submitted_at=now))
            session.flush()
            mirrored = self._mirror(
                "entries_sheet_id", "entries_range", [name, email, isoformat_utc(now)]
            )

        self.logger.info({"event": "sweepstakes.entry.recorded", "mirrored": mirrored})
        return {"success": True}

    def record_video_entry(
        self,
        email: Optional[str],
        phone: Optional[str],
        video_id: Optional[str],
        advertiser_id: Optional[str],
        package_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Participación por ver el video de un anunciante."""
        if not email or not phone or not video_id or not advertiser_id:
            raise SweepstakesValidationError("Missing required fields.")

        if package_type == COUPON_ONLY_PACKAGE:
            return {
                "message": "Video watched but this advertiser only includes coupons.",
                "sweepstakesEligible": False,
            }

        already = {"message": "Entry already recorded.", "sweepstakesEligible": True}
        now = self.clock()
        try:
            with self.db.get_session() as session:
                existing = (
                    session.query(VideoEntry)
                    .filter(VideoEntry.email == email, VideoEntry.video_id == video_id)
                    .first()
                )
                if existing is not None:
                    return already
                entry = VideoEntry(
                    email=email,
                    phone=phone,
                    video_id=video_id,
                    advertiser_id=advertiser_id,
                    package_type=package_type,
                    recorded_at=now,
                    week=sweepstakes_week_number(now.date()),
                )
                session.add(entry)
                session.flush()
                payload = entry.to_dict()
        except IntegrityError:
            # concurrent insert of the same (email, video)
            return already

        self.logger.info(
            {
                "event": "sweepstakes.video_entry.recorded",
                "advertiser_id": advertiser_id,
                "week": payload["week"],
            }
        )
        return {
            "message": "Entry recorded successfully.",
            "sweepstakesEligible": True,
            "entry": payload,
        }

    # Ganadores
    # =========

    def record_winner(
        self, name: Optional[str], prize: Optional[str], date: Optional[str]
    ) -> Dict[str, Any]:
        if not name or not prize or not date:
            raise SweepstakesValidationError("Missing winner fields")

        with self.db.get_session() as session:
            session.add(Winner(name=name, prize=prize, date=date, created_at=self.clock()))
            session.flush()
            self._mirror("winners_sheet_id", "winners_range", [name, prize, date])

        self.logger.info({"event": "sweepstakes.winner.recorded", "prize": prize})
        return {"success": True}

    def list_winners(self) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            rows = (
                session.query(Winner)
                .order_by(Winner.created_at.desc(), Winner.id.desc())
                .all()
            )
            return [row.to_dict() for row in rows]

    # Formularios
    # ===========

    def add_form_entry(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, Mapping):
            raise SweepstakesValidationError("Invalid submission")
        with self.db.get_session() as session:
            session.add(FormEntry(payload=dict(payload), submitted_at=self.clock()))
        return {"success": True}

    def list_form_entries(self) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            rows = session.query(FormEntry).order_by(FormEntry.id.asc()).all()
            return [row.to_dict() for row in rows]

    # Cupones
    # =======

    def active_coupons(self) -> List[Dict[str, Any]]:
        """Cupones activos y no vencidos, del más nuevo al más viejo."""
        today = self.clock().date().isoformat()
        with self.db.get_session() as session:
            rows = (
                session.query(Coupon)
                .filter(Coupon.is_active.is_(True))
                .order_by(Coupon.created_at.desc(), Coupon.id.desc())
                .all()
            )
            return [
                row.to_dict()
                for row in rows
                if not row.expires_on or row.expires_on >= today
            ]

    def add_coupon(self, **fields: Any) -> Dict[str, Any]:
        with self.db.get_session() as session:
            coupon = Coupon(created_at=self.clock(), **fields)
            session.add(coupon)
            session.flush()
            return coupon.to_dict()

# src/events/providers.py
# Proveedores de eventos: Eventbrite y Ticketmaster
# =================================================

"""
Clientes de las APIs de Eventbrite y Ticketmaster.

Los dos heredan de :class:`BaseCollector` (reintentos, backoff y logs
estructurados). Sin credencial o ante cualquier fallo devuelven una lista
vacía para no tumbar la agregación; el único caso que propaga errores es el
feed en vivo de Ticketmaster, que el endpoint traduce a un 500.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

from config.settings import EVENTS_CONFIG

from src.collectors.base_collector import BaseCollector, FetchError

from .errors import ProviderNotConfiguredError
from .models import CityInfo, UnifiedEvent
from .normalize import normalize_eventbrite, normalize_ticketmaster

EVENTBRITE_SEARCH_URL = "https://www.eventbriteapi.com/v3/events/search/"
TICKETMASTER_EVENTS_URL = "https://app.ticketmaster.com/discovery/v2/events.json"


class _EventProvider(BaseCollector):
    log_namespace = "events"
    provider_name = "provider"
    credential_key = ""

    def __init__(
        self,
        logger_factory=None,
        *,
        events_config: Optional[Mapping[str, Any]] = None,
        **kwargs,
    ):
        super().__init__(logger_factory, **kwargs)
        self.events_config: Dict[str, Any] = {**EVENTS_CONFIG, **(events_config or {})}

    @property
    def credential(self) -> Optional[str]:
        return self.events_config.get(self.credential_key) or None

    def _skip(self, city: Optional[CityInfo]) -> List[UnifiedEvent]:
        self._emit_log(
            "warning",
            "events.provider.skipped",
            source_id=self.provider_name,
            details={
                "reason": f"missing {self.credential_key}",
                "city": city.slug if city else None,
            },
        )
        return []

    async def _get_json(
        self, url: str, *, params: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        async with self._client() as client:
            response = await self._request(
                client, url, source_id=self.provider_name, params=params, headers=headers
            )
        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            raise FetchError(
                f"invalid JSON: {exc}", url=url, status_code=response.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise FetchError("unexpected payload", url=url, status_code=response.status_code)
        return payload

    def _failed(self, exc: FetchError, city: Optional[CityInfo]) -> List[UnifiedEvent]:
        self._record_source(items=0, failed=True)
        self._emit_log(
            "error",
            "events.provider.failed",
            source_id=self.provider_name,
            details={
                "error": str(exc),
                "status_code": exc.status_code,
                "city": city.slug if city else None,
            },
        )
        return []


class EventbriteProvider(_EventProvider):
    provider_name = "eventbrite"
    credential_key = "eventbrite_token"

    async def fetch(
        self, city: CityInfo, within: Optional[str] = None, *, fallback_to_city: bool = False
    ) -> List[UnifiedEvent]:
        """
        Eventos de Eventbrite alrededor de ``city``.

        Con ``fallback_to_city`` los eventos cuyo lugar no reconoce el
        directorio se asignan a la ciudad pedida en vez de descartarse.
        """
        token = self.credential
        if not token:
            return self._skip(city)

        params = {
            "location.address": city.name,
            "location.within": within or self.events_config["eventbrite_within"],
            "expand": "venue",
            "sort_by": "date",
        }
        try:
            payload = await self._get_json(
                EVENTBRITE_SEARCH_URL, params=params, headers={"Authorization": f"Bearer {token}"}
            )
        except FetchError as exc:
            return self._failed(exc, city)

        fallback = city if fallback_to_city else None
        events = [
            event
            for event in (
                normalize_eventbrite(raw, fallback_city=fallback)
                for raw in payload.get("events") or []
            )
            if event is not None
        ]
        self._record_source(items=len(events))
        return events


class TicketmasterProvider(_EventProvider):
    provider_name = "ticketmaster"
    credential_key = "ticketmaster_api_key"

    async def fetch(
        self, city: CityInfo, strict_local: bool = False, *, fallback_to_city: bool = False
    ) -> List[UnifiedEvent]:
        """Regional (palabra clave + radio) o estrictamente local (``city=``)."""
        apikey = self.credential
        if not apikey:
            return self._skip(city)

        params: Dict[str, Any] = {
            "apikey": apikey,
            "size": self.events_config["ticketmaster_page_size"],
        }
        if strict_local:
            params.update({"city": city.name, "countryCode": "US"})
        else:
            params.update(
                {
                    "keyword": city.name,
                    "radius": self.events_config["ticketmaster_radius_miles"],
                    "unit": "miles",
                    "sort": "date,asc",
                }
            )
        try:
            payload = await self._get_json(TICKETMASTER_EVENTS_URL, params=params)
        except FetchError as exc:
            return self._failed(exc, city)

        fallback = city if fallback_to_city else None
        events = [
            event
            for event in (
                normalize_ticketmaster(raw, fallback_city=fallback)
                for raw in (payload.get("_embedded") or {}).get("events") or []
            )
            if event is not None
        ]
        self._record_source(items=len(events))
        return events

    async def fetch_live(self) -> List[Dict[str, Any]]:
        """Eventos crudos alrededor del centro del feed en vivo."""
        apikey = self.credential
        if not apikey:
            raise ProviderNotConfiguredError(self.provider_name)

        cfg = self.events_config
        params = {
            "apikey": apikey,
            "latlong": f"{cfg['live_latitude']},{cfg['live_longitude']}",
            "radius": cfg["live_radius_miles"],
            "unit": "miles",
            "locale": "*",
        }
        payload = await self._get_json(TICKETMASTER_EVENTS_URL, params=params)
        events = (payload.get("_embedded") or {}).get("events") or []
        self._emit_log(
            "info",
            "events.live.fetched",
            source_id=self.provider_name,
            details={"count": len(events)},
        )
        return events

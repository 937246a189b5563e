"""
utils/geolocation.py
────────────────────────────────────────────
IP → Land/Stadt über ip-api.com (Free-Tier: 45 Anfragen/Minute).
- Ergebnisse werden pro IP zwischengespeichert (Standard: 1 Stunde)
- Jeder Fehler liefert Unknown/Unknown, nie eine Exception
────────────────────────────────────────────
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import httpx
from fastapi import Request

import config

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class GeoLocation:
    country: str = UNKNOWN
    city: str = UNKNOWN


UNKNOWN_LOCATION = GeoLocation()


class GeoResolver:
    """
    Löst IP-Adressen zu Standorten auf.
    Der httpx-Client wird von außen übergeben (Lifespan der App).
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = config.GEO_API_URL,
        timeout: float = config.GEO_TIMEOUT,
        cache_ttl: float = config.GEO_CACHE_TTL,
        cache_size: int = config.GEO_CACHE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.cache_size = cache_size
        self._clock = clock
        self._cache: Dict[str, Tuple[float, GeoLocation]] = {}

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------
    def _cached(self, ip: str) -> Optional[GeoLocation]:
        entry = self._cache.get(ip)
        if entry is None:
            return None
        expires_at, location = entry
        if expires_at <= self._clock():
            del self._cache[ip]
            return None
        return location

    def _remember(self, ip: str, location: GeoLocation) -> None:
        if self.cache_ttl <= 0:
            return
        self._cache.pop(ip, None)
        while len(self._cache) >= self.cache_size > 0:
            # ältesten Eintrag verwerfen
            del self._cache[next(iter(self._cache))]
        self._cache[ip] = (self._clock() + self.cache_ttl, location)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    async def locate(self, ip: str) -> GeoLocation:
        cached = self._cached(ip)
        if cached is not None:
            return cached

        try:
            resp = await self.client.get(
                f"{self.base_url}/{ip}",
                params={"fields": "status,country,city"},
                timeout=self.timeout,
            )
            if resp.status_code != 200:
                logger.info("Geolocation für %s fehlgeschlagen: HTTP %s", ip, resp.status_code)
                return UNKNOWN_LOCATION
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geolocation-Dienst nicht erreichbar (%s): %s", ip, exc)
            return UNKNOWN_LOCATION

        if not isinstance(data, dict) or data.get("status") != "success":
            return UNKNOWN_LOCATION

        location = GeoLocation(
            country=data.get("country") or UNKNOWN,
            city=data.get("city") or UNKNOWN,
        )
        self._remember(ip, location)
        return location


def get_geo_resolver(request: Request) -> GeoResolver:
    """FastAPI-Dependency: der Resolver wird im Lifespan der App angelegt."""
    return request.app.state.geo_resolver

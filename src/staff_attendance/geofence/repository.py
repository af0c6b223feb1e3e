from __future__ import annotations

from typing import Optional, Protocol

from .model import GeofenceSetting


class GeofenceRepository(Protocol):
    def get_current(self) -> Optional[GeofenceSetting]:
        raise NotImplementedError

    def upsert(self, *, school_latitude: float, school_longitude: float, tolerance_radius: float) -> GeofenceSetting:
        """Create the row on first write, update it in place afterwards."""

        raise NotImplementedError

from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_float, require_range
from ..core.exceptions import ConfigurationMissingError, OutOfRangeError, ValidationError
from .geo import haversine_distance_m, is_within_radius
from .model import GeofenceSetting
from .repository import GeofenceRepository

logger = logging.getLogger(__name__)


class GeofenceService:
    """Use cases: read/update the school geofence, validate reported locations."""

    def __init__(self, geofence: GeofenceRepository):
        self._geofence = geofence

    def get_settings(self) -> Optional[GeofenceSetting]:
        return self._geofence.get_current()

    def update_settings(self, *, school_latitude, school_longitude, tolerance_radius) -> GeofenceSetting:
        lat = require_range(require_float(school_latitude, "school_latitude"), "school_latitude", -90, 90)
        lon = require_range(require_float(school_longitude, "school_longitude"), "school_longitude", -180, 180)
        radius = require_float(tolerance_radius, "tolerance_radius")
        if radius <= 0:
            raise ValidationError("tolerance_radius must be greater than 0")

        setting = self._geofence.upsert(school_latitude=lat, school_longitude=lon, tolerance_radius=radius)
        logger.info("Geofence updated: lat=%s lon=%s radius=%sm", lat, lon, radius)
        return setting

    def require_within(self, latitude: float, longitude: float) -> GeofenceSetting:
        """Raise unless a geofence exists and the point lies inside it."""
        setting = self._geofence.get_current()
        if setting is None:
            raise ConfigurationMissingError("Geotag settings not configured")

        if not is_within_radius(
            latitude, longitude, setting.school_latitude, setting.school_longitude, setting.tolerance_radius
        ):
            distance = haversine_distance_m(latitude, longitude, setting.school_latitude, setting.school_longitude)
            raise OutOfRangeError(
                f"Location is outside allowed radius ({distance:.0f}m > {setting.tolerance_radius:.0f}m)"
            )
        return setting

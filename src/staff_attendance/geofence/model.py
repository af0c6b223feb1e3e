from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class GeofenceSetting:
    """Single-row configuration: school coordinate and tolerance radius (meters)."""

    school_latitude: float
    school_longitude: float
    tolerance_radius: float
    updated_at: Optional[datetime] = None

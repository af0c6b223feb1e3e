from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account class used for access control."""

    ADMIN = "admin"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Attendance status stored in the database."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    ABSENT = "ABSENT"

    @property
    def label(self) -> str:
        return {
            AttendanceStatus.ON_TIME: "Hadir",
            AttendanceStatus.LATE: "Terlambat",
            AttendanceStatus.ABSENT: "Alpha",
        }[self]


class AttendanceAction(str, Enum):
    CHECKIN = "checkin"
    CHECKOUT = "checkout"


class StaffPosition(str, Enum):
    KEPALA_MADRASAH = "Kepala Madrasah"
    KEPALA_TU = "Kepala TU"
    STAF_TU = "Staf TU"
    OPERATOR = "Operator"
    PENJAGA_SEKOLAH = "Penjaga Sekolah"

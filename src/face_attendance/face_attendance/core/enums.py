from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """Loại bản ghi chấm công (giá trị trùng với định dạng lưu trữ)."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class MatchStatus(str, Enum):
    """Kết quả phân loại của một lần đối sánh khuôn mặt."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"
    REJECTED = "rejected"
    NO_MATCH = "no_match"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    FILE = "file"
    MYSQL = "mysql"


class ExtractorKind(str, Enum):
    SIMULATED = "simulated"
    DEMO = "demo"
    FACE_RECOGNITION = "face_recognition"

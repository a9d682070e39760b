from __future__ import annotations

from datetime import datetime, timezone

import pytest

from face_attendance.faces.model import BoundingRegion, FeatureVector, encode_face_data
from face_attendance.identities.model import Identity
from face_attendance.storage.blob_store import InMemoryBlobStore
from face_attendance.storage.identity_store import IdentityStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 31, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_vector():
    def _make(*, landmark: float = 50.0, descriptor: float = 0.5, quality: float = 1.0, descriptors=None, landmarks=None):
        if landmarks is None:
            landmarks = [landmark + (i % 7) for i in range(68)]
        if descriptors is None:
            descriptors = [descriptor if i % 2 else -descriptor / 2 for i in range(128)]
        return FeatureVector(
            landmarks=tuple(landmarks),
            descriptors=tuple(descriptors),
            bounding_region=BoundingRegion(x=50, y=60, width=140, height=170),
            quality=quality,
        )

    return _make


@pytest.fixture
def make_identity():
    def _make(identity_id: str, *, name: str = "", email: str = "", department: str = "Engineering", vector=None, face_data=None):
        if face_data is None and vector is not None:
            face_data = encode_face_data(vector)
        return Identity(
            id=identity_id,
            name=name or f"Person {identity_id}",
            email=email or f"{identity_id}@company.com",
            department=department,
            face_data=face_data,
            enrolled_at="2024-01-15T08:00:00.000Z",
        )

    return _make


@pytest.fixture
def empty_store() -> IdentityStore:
    return IdentityStore(InMemoryBlobStore(), auto_seed=False)

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Optional

from .attendance.session import AttendanceSessionService
from .core.constants import DEFAULT_LOCATION, DEFAULT_SEED_RANDOM_SEED
from .core.enums import ExtractorKind, StorageBackend
from .core.exceptions import ValidationError
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .faces.extractor import DemoFeatureExtractor, FeatureExtractor, SimulatedFeatureExtractor
from .identities.service import IdentityService
from .matching.engine import MatchEngine
from .storage.blob_store import BlobStore, InMemoryBlobStore, JsonFileBlobStore
from .storage.identity_store import IdentityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    blobs: BlobStore
    store: IdentityStore
    extractor: FeatureExtractor
    match_engine: MatchEngine

    identity_service: IdentityService
    session_service: AttendanceSessionService


def build_blob_store(settings: Any) -> BlobStore:
    backend = StorageBackend(str(getattr(settings, "STORAGE_BACKEND", "memory")).lower())

    if backend == StorageBackend.MEMORY:
        return InMemoryBlobStore()

    if backend == StorageBackend.FILE:
        data_file = getattr(settings, "DATA_FILE", "")
        if not data_file:
            raise ValidationError("DATA_FILE must be set for the file storage backend")
        return JsonFileBlobStore(data_file)

    from .storage.mysql_blob_store import MySQLBlobStore

    conn = DatabaseConnection(DBConfig.from_mapping(getattr(settings, "DB_CONFIG")))
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(conn)
    return MySQLBlobStore(conn)


def build_extractor(settings: Any) -> FeatureExtractor:
    kind = ExtractorKind(str(getattr(settings, "FEATURE_EXTRACTOR", "simulated")).lower())
    latency = tuple(getattr(settings, "CAPTURE_LATENCY", (0.0, 0.0)))

    if kind == ExtractorKind.SIMULATED:
        return SimulatedFeatureExtractor(latency_range=latency)
    if kind == ExtractorKind.DEMO:
        return DemoFeatureExtractor(latency_range=latency)

    from .faces.face_recognition_extractor import FaceRecognitionExtractor

    return FaceRecognitionExtractor()


def build_container(
    settings: Any,
    *,
    blobs: Optional[BlobStore] = None,
    extractor: Optional[FeatureExtractor] = None,
    rng: Optional[random.Random] = None,
) -> Container:
    blobs = blobs if blobs is not None else build_blob_store(settings)
    extractor = extractor or build_extractor(settings)

    store = IdentityStore(
        blobs,
        auto_seed=bool(getattr(settings, "AUTO_SEED_DEMO", True)),
        seed=getattr(settings, "SEED_RANDOM_SEED", DEFAULT_SEED_RANDOM_SEED),
    )
    match_engine = MatchEngine(extractor, rng=rng)
    identity_service = IdentityService(store)
    session_service = AttendanceSessionService(
        store,
        store,
        accept_unverified=bool(getattr(settings, "ACCEPT_UNVERIFIED", True)),
        default_location=getattr(settings, "DEFAULT_LOCATION", DEFAULT_LOCATION),
    )

    logger.info("Container ready (storage=%s, extractor=%s)", type(blobs).__name__, type(extractor).__name__)
    return Container(
        blobs=blobs,
        store=store,
        extractor=extractor,
        match_engine=match_engine,
        identity_service=identity_service,
        session_service=session_service,
    )

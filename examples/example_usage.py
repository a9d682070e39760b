"""Example: use the service layer directly (no Flask).

Enrolls nobody new; matches a demo capture of a seeded employee against the
gallery and records the resulting attendance.
"""

import asyncio
import importlib

from config import get_settings_module

from face_attendance.container import build_container
from face_attendance.faces.extractor import DemoFeatureExtractor


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings, extractor=DemoFeatureExtractor())

    gallery = container.store.list_identities()
    if not gallery:
        print("Gallery is empty; run scripts/seed_db.py first")
        return

    captured = asyncio.run(container.match_engine.capture_face_data(gallery[0].id))
    verdict = container.match_engine.match_against_gallery(captured, gallery)
    outcome = container.session_service.process_verdict(verdict)
    print(outcome.verdict.to_payload())


if __name__ == "__main__":
    main()

"""Replace the stored data with the demo gallery and a fresh week of attendance."""

from __future__ import annotations

import importlib

from config import get_settings_module

from face_attendance.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)

    container.store.reset_to_seed_data()
    identities = container.store.list_identities()
    events = container.store.list_attendance_events()
    print(f"OK: Seeded {len(identities)} employees and {len(events)} attendance records ({settings.STORAGE_BACKEND})")


if __name__ == "__main__":
    main()

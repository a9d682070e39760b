"""Backup stored collections.

Note: writes the employee and attendance records of the configured storage
backend into one JSON file under ``backups/``.
"""

from __future__ import annotations

import importlib
import json
from datetime import datetime
from pathlib import Path

from config import get_settings_module

from face_attendance.container import build_container
from face_attendance.core.constants import ATTENDANCE_KEY, DEMO_DATA_INITIALIZED_KEY, EMPLOYEES_KEY


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"face_attendance_{ts}.json"

    records = {
        name: container.blobs.get(name)
        for name in (EMPLOYEES_KEY, ATTENDANCE_KEY, DEMO_DATA_INITIALIZED_KEY)
    }
    out_file.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()

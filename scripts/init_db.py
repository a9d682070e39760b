from __future__ import annotations

import importlib

from config import get_settings_module

from face_attendance.database.bootstrap import apply_schema, list_tables
from face_attendance.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_mapping(settings.DB_CONFIG)
    conn = DatabaseConnection(config)

    apply_schema(conn)
    tables = list_tables(conn)
    print(
        "OK: kv_store ready -> "
        f"{config.user}@{config.host}:{config.port}/{config.database} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()

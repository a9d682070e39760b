from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .api.controller import register as register_api
from .common.logging_setup import setup_logging
from .container import Container, build_container

logger = logging.getLogger(__name__)


def load_settings(settings_module: Optional[str] = None) -> ModuleType:
    return importlib.import_module(settings_module or get_settings_module())


def create_app(
    settings: Optional[ModuleType] = None,
    *,
    container: Optional[Container] = None,
) -> Flask:
    load_dotenv(override=False)
    settings = settings or load_settings()

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), log_dir=getattr(settings, "LOG_DIR", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = container or build_container(settings)
    app.extensions["face_attendance"] = container

    register_api(app, container)

    logger.info(
        "face-attendance started (settings=%s, storage=%s)",
        settings.__name__,
        getattr(settings, "STORAGE_BACKEND", "memory"),
    )
    return app

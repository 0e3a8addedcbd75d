from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .commands import register as register_commands
from .common.callable import register_error_handlers
from .container import Container, build_container
from .core.logging import configure_logging
from .attendance.controller import register as register_attendance
from .learning.controller import register as register_learning
from .sessions.controller import register as register_sessions
from .sync.controller import register as register_sync

logger = logging.getLogger(__name__)


def load_settings() -> dict:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {k: getattr(module, k) for k in dir(module) if k.isupper()}
    settings["SETTINGS_MODULE"] = settings_module
    return settings


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings()
    configure_logging(settings.get("LOG_LEVEL", "INFO"))
    app.secret_key = settings.get("SECRET_KEY")
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    if container is None:
        container = build_container(settings)
    app.extensions["nxtprof"] = container

    logger.info(
        "Starting with %s (tz=%s)",
        settings["SETTINGS_MODULE"],
        container.time_zone,
    )

    register_error_handlers(app)
    register_sessions(app, container)
    register_attendance(app, container)
    register_learning(app, container)
    register_sync(app, container)
    register_commands(app)

    return app

import json
import os
import logging
from flask import Flask
from release_calendar.repo import SqliteRepo
from release_calendar.scheduler import WindowConfig
from release_calendar.service import CalendarService
from release_calendar.web import register_routes, register_error_handlers

DEFAULT_CFG = {
    "database": "data/calendar.db",
    "debug": True,
    "host": "127.0.0.1",
    "port": 5000,
    "logging_level": "INFO",
    "months_back": 6,
    "months_forward": 3,
}

def load_config(path="config.json"):
    if not os.path.exists(path):
        print("config.json not found — using defaults:", DEFAULT_CFG)
        return DEFAULT_CFG.copy()
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except (OSError, ValueError) as e:
        print("Failed to read config.json:", e, " — using defaults")
        return DEFAULT_CFG.copy()
    merged = DEFAULT_CFG.copy()
    merged.update(cfg)
    return merged

cfg = load_config()

def configure_logging(level_name: str, debug: bool = False):
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # quieter werkzeug when not debugging
    logging.getLogger("werkzeug").setLevel(logging.INFO if debug else logging.WARNING)

def create_app(config=None):
    config = config or cfg
    configure_logging(config.get("logging_level", "INFO"), config.get("debug", False))
    logger = logging.getLogger(__name__)
    logger.info("Starting app with config: %s", {k: v for k, v in config.items() if k != "database"})

    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "dev-key")
    repo = SqliteRepo(config["database"])
    repo.init_schema()
    window = WindowConfig(months_back=config.get("months_back", 6),
                          months_forward=config.get("months_forward", 3))
    service = CalendarService(repo, window=window)
    app.config["SERVICE"] = service

    register_routes(app, service)
    register_error_handlers(app)
    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host=cfg.get("host", "127.0.0.1"), port=cfg.get("port", 5000), debug=cfg.get("debug", True))

from __future__ import annotations
import logging
import os
from flask import Flask
from config import config_map
from extensions import db, migrate
from sqlalchemy import inspect
from storage import init_storage

log = logging.getLogger(__name__)

def _seed_from_config(app: Flask) -> None:
    if not app.config.get("SEED_DEMO_DATA"):
        return
    with app.app_context():
        storage = app.extensions["storage"]
        # tables may not exist yet (before `flask db upgrade`)
        if storage.name == "database" and not inspect(db.engine).has_table("teacher"):
            return
        from seed import seed_demo  # local import, seed.py imports create_app
        created = seed_demo(storage)
        if created:
            log.info("demo data seeded", extra={"event": "seed"})

def register_blueprints(app: Flask) -> None:
    from blueprints.core import bp as core_bp
    from blueprints.directory import bp as directory_bp
    from blueprints.schedule.routes import bp as schedule_bp
    from blueprints.dashboard.routes import bp as dashboard_bp

    # core has no prefix -> '/health' at the root
    app.register_blueprint(core_bp)
    app.register_blueprint(directory_bp, url_prefix="/api")
    app.register_blueprint(schedule_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp, url_prefix="/api")

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    init_storage(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app

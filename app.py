from __future__ import annotations
import os
from importlib import import_module
from typing import Any, Dict
from flask import Flask
from config import config_map
from extensions import db, migrate

def register_blueprints(app: Flask) -> None:
    # Жёстко импортируем модуль с маршрутами core перед взятием bp
    import_module("blueprints.core.routes")
    from blueprints.core import bp as core_bp
    from blueprints.directory import bp as directory_bp
    from blueprints.search import bp as search_bp
    from blueprints.navigation import bp as navigation_bp
    from blueprints.reports import bp as reports_bp

    # core без префикса → '/health' в корне
    app.register_blueprint(core_bp)
    app.register_blueprint(directory_bp, url_prefix="/api/v1")
    app.register_blueprint(search_bp, url_prefix="/api/v1")
    app.register_blueprint(navigation_bp, url_prefix="/api/v1")
    app.register_blueprint(reports_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None, overrides: Dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # overrides применяем до init_app: от них зависит проверка БД при старте
    if overrides:
        app.config.update(overrides)

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    register_blueprints(app)

    from blueprints.directory.services import init_store
    from blueprints.navigation.providers import init_providers
    init_store(app)
    init_providers(app)
    return app

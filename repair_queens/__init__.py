# repair_queens/__init__.py
"""
Application Factory for the Repair Queens web console.

The console does not own any data. It keeps the signed-in user's backend
token in the session and calls the Repair Queens REST API for everything:

- NO blueprint is registered outside create_app().
- Optional blueprints never take the app down on boot (see _try_register).
- Configuration comes from environment variables and can be overridden in
  app.config afterwards (the tests do this).

Adding a new blueprint:
1) Create the module (e.g. repair_queens/routes/area/my_route.py):
       from flask import Blueprint
       my_route_bp = Blueprint("my_route_bp", __name__)

2) Register it inside create_app():
       _try_register(app, "repair_queens.routes.area.my_route", "my_route_bp")

Running:
- CLI: FLASK_APP="repair_queens:create_app" flask run
"""

import logging
import os
from typing import Optional

from flask import Flask
from flask_login import LoginManager

# ---------------------------------------------------------------------
# Global extensions (instantiated here, initialised in the factory)
# ---------------------------------------------------------------------
login_manager = LoginManager()


# ---------------------------------------------------------------------
# Helper: dynamic, fault-tolerant blueprint registration
# ---------------------------------------------------------------------
def _try_register(
    app: Flask,
    import_line: str,
    attr: str,
    *,
    required: bool = False,
    alias: Optional[str] = None,
) -> None:
    """
    Import a module and register one of its blueprints.

    Parameters:
      - import_line: module path (e.g. "repair_queens.routes.auth_routes.login")
      - attr: name of the Blueprint object inside the module
      - required: when True a failure aborts the boot, otherwise it is logged
      - alias: friendly name for the boot log
    """
    import importlib

    name = alias or attr
    try:
        mod = importlib.import_module(import_line)
        bp = getattr(mod, attr)
        app.register_blueprint(bp)
        app.logger.info(
            "[BOOT] Blueprint registered: %s (%s.%s)", name, import_line, attr
        )
    except Exception as e:
        msg = f"[BOOT] Failed to register blueprint: {name} ({import_line}.{attr}) -> {e}"
        if required:
            app.logger.exception(msg)
            raise
        else:
            app.logger.warning(msg)


# ---------------------------------------------------------------------
# Main factory
# ---------------------------------------------------------------------
def create_app() -> Flask:
    """
    Build and configure the Flask application:
      - Loads settings from the environment.
      - Initialises Flask-Login.
      - Registers blueprints.
    """
    app = Flask(__name__, template_folder="templates")

    # -----------------------------------------------------------------
    # Settings
    # -----------------------------------------------------------------
    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    # Repair Queens REST backend, e.g. http://localhost:3000
    app.config["REPAIR_QUEENS_API_URL"] = os.environ.get(
        "REPAIR_QUEENS_API_URL", "http://localhost:3000"
    )
    app.config["REPAIR_QUEENS_API_TIMEOUT"] = float(
        os.environ.get("REPAIR_QUEENS_API_TIMEOUT", "30")
    )

    # Roles allowed to run the data export
    app.config["EXPORT_ROLES"] = ("admin", "manager", "accountant")

    if not app.logger.handlers:
        logging.basicConfig(level=logging.INFO)

    # -----------------------------------------------------------------
    # Extensions
    # -----------------------------------------------------------------
    login_manager.init_app(app)

    from repair_queens.models.user import load_session_user
    from repair_queens.utils.auth_utils import unauthorized

    login_manager.user_loader(load_session_user)
    login_manager.unauthorized_handler(unauthorized)

    # -----------------------------------------------------------------
    # Blueprints
    # -----------------------------------------------------------------
    # 1) Sign-in
    _try_register(
        app, "repair_queens.routes.auth_routes.login", "login_bp", required=True
    )

    # 2) Inventory
    _try_register(
        app,
        "repair_queens.routes.inventory_routes.low_stock",
        "low_stock_bp",
        required=True,
    )
    _try_register(
        app,
        "repair_queens.routes.inventory_routes.stock_update",
        "stock_update_bp",
        required=False,
    )

    # 3) Admin export
    _try_register(
        app,
        "repair_queens.routes.admin_routes.export_routes",
        "export_bp",
        required=True,
        alias="Export",
    )

    # 4) Schedule
    _try_register(
        app,
        "repair_queens.routes.schedule_routes.calendar",
        "calendar_bp",
        required=False,
    )

    app.logger.info("[BOOT] Application initialised.")
    return app

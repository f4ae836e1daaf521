"""
Package: promopage
Create and configure the Flask app, logging, and database
"""

import sys
from flask import Flask
from promopage import config
from promopage.common import log_handlers

# -----------------------------------------------------------------------------
# One global Flask app so `from promopage import app` returns the instance with
# every route registered; create_app() hands out the same object
# -----------------------------------------------------------------------------
app = Flask(__name__)
app.config.from_object(config)

# database plugin
from promopage.models import db  # pylint: disable=wrong-import-position
db.init_app(app)

with app.app_context():
    # routes bind to current_app, so import them only once the app exists
    from promopage import routes, models  # noqa: F401  pylint: disable=unused-import, wrong-import-position
    from promopage.common import error_handlers, cli_commands  # noqa: F401  pylint: disable=unused-import, wrong-import-position
    from promopage.ui import ui_bp  # pylint: disable=wrong-import-position

    app.register_blueprint(ui_bp)

    try:
        db.create_all()
    except Exception as err:  # pylint: disable=broad-except
        app.logger.critical("%s: Cannot continue", err)
        sys.exit(4)

    log_handlers.init_logging(app, "gunicorn.error")

    app.logger.info(70 * "*")
    app.logger.info("  P R O M O T I O N   P A G E S   S E R V I C E  ".center(70, "*"))
    app.logger.info(70 * "*")


def create_app():
    """Factory-style accessor to the (already created) global app."""
    return app

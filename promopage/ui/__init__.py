"""Browser-facing pages of the Promotion Pages service.

`/ui` is the administrator entry point used by the BDD suite, and
`/p/<slug>` is the public landing page a customer opens from a short URL.
Neither replaces the REST API routes.
"""

from flask import Blueprint, abort, current_app, render_template

from promopage.common import status
from promopage.models import Promotion

# Serve templates from promopage/templates and static assets from promopage/static
ui_bp = Blueprint(
    "ui",
    __name__,
    template_folder="../templates",
    static_folder="../static",
)


@ui_bp.route("/ui", methods=["GET"])
def index():
    """Admin UI entry point listing the stored promotions."""
    promotions = Promotion.all()
    return render_template("index.html", title="Promotions Admin", promotions=promotions)


@ui_bp.route("/p/<string:slug>", methods=["GET"])
def landing_page(slug: str):
    """Public landing page of one promotion."""
    current_app.logger.info("Landing page requested for slug [%s]", slug)
    promotion = Promotion.find_by_slug(slug)
    if not promotion:
        abort(status.HTTP_404_NOT_FOUND, f"Promotion '{slug}' was not found.")

    if not promotion.is_live():
        # keep the page reachable so old short URLs explain themselves
        return render_template(
            "promotion.html", title=promotion.title, promotion=promotion, rendered=None
        )

    rendered = promotion.render(current_app.config["NO_CONTENT_MESSAGE"])
    return render_template(
        "promotion.html", title=promotion.title, promotion=promotion, rendered=rendered
    )

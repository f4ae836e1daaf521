######################################################################
# Copyright 2016, 2024 John J. Rofrano. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
######################################################################

"""
Promotion Pages Service

This service implements a REST API that allows you to Create, Read, Update,
Delete and List Promotion pages, and to preview how their content markup
renders
"""

# Standard library
from datetime import date, timedelta

# Third-party
from flask import abort, current_app as app, jsonify, request, url_for

# First-party
from promopage.common import status  # HTTP status codes
from promopage.content import (
    count_groups,
    get_group,
    render_grouped_content,
    render_single_block_content,
    text_groups,
)
from promopage.models import DataValidationError, Promotion


def _parse_bool_strict(value: str):
    """
    Strictly parse query-string boolean.
    Accepted (case-insensitive, trimmed):
      True:  'true', '1', 'yes'
      False: 'false', '0', 'no'
    Others: return None (caller should raise 400)
    """
    v = str(value).strip().lower()
    if v in {"true", "1", "yes"}:
        return True
    if v in {"false", "0", "no"}:
        return False
    return None


def _find_or_404(promotion_id: int) -> Promotion:
    promotion = Promotion.find(promotion_id)
    if not promotion:
        abort(
            status.HTTP_404_NOT_FOUND,
            f"Promotion with id '{promotion_id}' was not found.",
        )
    return promotion


def _check_slug_free(slug: str, promotion_id=None):
    """Aborts with 409 when another promotion already uses ``slug``"""
    owner = Promotion.find_by_slug(slug)
    if owner and owner.id != promotion_id:
        abort(
            status.HTTP_409_CONFLICT,
            f"Slug '{slug}' is already used by promotion '{owner.id}'.",
        )


######################################################################
# Root endpoint
######################################################################
@app.route("/", methods=["GET"])
def index():
    """Root URL response"""
    return (
        jsonify(
            name="Promotion Pages Service",
            version="1.0.0",
            description="RESTful service for managing promotion landing pages",
            paths={
                "promotions": "/promotions",
                "preview": "/preview",
                "ui": "/ui",
            },
        ),
        status.HTTP_200_OK,
    )


######################################################################
# LIST Promotions with optional filters

# Supported query params:
# ?id=<int>        -> single record as [ ... ] or []
# ?active=<bool>   -> true  => live today (is_active and inside the date window)
#                     false => not live today
#                     Accepted: true/false/1/0/yes/no (case-insensitive)
#                     Invalid => 400
# ?slug=<str>      -> [ ... ] or []
# ?code=<str>      -> exact match list
# ?target=<str>    -> exact match list
# Priority: id > active > slug > code > target > all
######################################################################
@app.route("/promotions", methods=["GET"])
def list_promotions():
    """
    List Promotions
    - Without query: return all promotions
    - With filter: return exact matches
    """
    app.logger.info("Request to list Promotions")

    promotion_id = request.args.get("id")
    active_raw = request.args.get("active")
    slug = request.args.get("slug")
    code = request.args.get("code")
    target = request.args.get("target")

    if promotion_id:
        app.logger.info("Filtering by id=%s", promotion_id)
        p = Promotion.find(promotion_id)
        promotions = [p] if p else []

    elif active_raw is not None:
        active = _parse_bool_strict(active_raw)
        if active is None:
            abort(
                status.HTTP_400_BAD_REQUEST,
                (
                    "Invalid value for query parameter 'active'. "
                    "Accepted: true, false, 1, 0, yes, no (case-insensitive). "
                    f"Received: {active_raw!r}"
                ),
            )
        app.logger.info("Filtering by active=%s", active)
        promotions = Promotion.find_active() if active else Promotion.find_inactive()

    elif slug:
        app.logger.info("Filtering by slug=%s", slug)
        p = Promotion.find_by_slug(slug.strip())
        promotions = [p] if p else []
    elif code:
        app.logger.info("Filtering by code=%s", code)
        promotions = Promotion.find_by_code(code.strip())
    elif target:
        app.logger.info("Filtering by target=%s", target)
        promotions = Promotion.find_by_target(target.strip())
    else:
        promotions = Promotion.all()

    results = [p.serialize() for p in promotions]
    return jsonify(results), status.HTTP_200_OK


######################################################################
# READ a Promotion
######################################################################
@app.route("/promotions/<int:promotion_id>", methods=["GET"])
def get_promotions(promotion_id: int):
    """
    Get a Promotion by id
    """
    app.logger.info("Request to get Promotion with id [%s]", promotion_id)
    promotion = _find_or_404(promotion_id)
    return jsonify(promotion.serialize()), status.HTTP_200_OK


######################################################################
# CREATE a Promotion
######################################################################
@app.route("/promotions", methods=["POST"])
def create_promotions():
    """
    Create a Promotion
    """
    app.logger.info("Request to Create a Promotion")
    check_content_type("application/json")

    promotion = Promotion()
    try:
        data = request.get_json()
        app.logger.info("Processing: %s", data)
        promotion.deserialize(data)
    except DataValidationError as error:
        abort(status.HTTP_400_BAD_REQUEST, str(error))

    _check_slug_free(promotion.slug)
    promotion.create()

    location_url = url_for("get_promotions", promotion_id=promotion.id, _external=True)
    return (
        jsonify(promotion.serialize()),
        status.HTTP_201_CREATED,
        {"Location": location_url},
    )


######################################################################
# UPDATE a Promotion
######################################################################
@app.route("/promotions/<int:promotion_id>", methods=["PUT"])
def update_promotions(promotion_id: int):
    """
    Update a Promotion
    Replaces fields of a promotion with payload values
    """
    app.logger.info("Request to update Promotion with id [%s]", promotion_id)
    check_content_type("application/json")

    promotion = _find_or_404(promotion_id)

    data = request.get_json()
    app.logger.info("Processing: %s", data)
    if isinstance(data, dict) and "id" in data and str(data["id"]) != str(promotion_id):
        abort(status.HTTP_400_BAD_REQUEST, "ID in body must match resource path")
    try:
        # validate on a detached copy so a rejected body leaves the record untouched
        candidate = Promotion().deserialize(data)
    except DataValidationError as error:
        abort(status.HTTP_400_BAD_REQUEST, str(error))

    _check_slug_free(candidate.slug, promotion_id)
    promotion.deserialize(data)
    promotion.id = promotion_id  # path id takes precedence
    promotion.update()

    return jsonify(promotion.serialize()), status.HTTP_200_OK


######################################################################
# DEACTIVATE a Promotion (action)
######################################################################
@app.route("/promotions/<int:promotion_id>/deactivate", methods=["PUT"])
def deactivate_promotion(promotion_id: int):
    """
    Action: switch a promotion off and close its date window at yesterday,
    keeping the record for history. An end_date earlier than yesterday is
    never pushed forward, and a promotion that has not started yet ends on
    its start_date.
    """
    app.logger.info("Request to deactivate Promotion with id [%s]", promotion_id)
    promotion = _find_or_404(promotion_id)

    yesterday = date.today() - timedelta(days=1)
    # never before start_date, never later than it already was
    promotion.end_date = max(promotion.start_date, min(promotion.end_date, yesterday))
    promotion.is_active = False
    promotion.update()

    return jsonify(promotion.serialize()), status.HTTP_200_OK


######################################################################
# DELETE a Promotion
######################################################################
@app.route("/promotions/<int:promotion_id>", methods=["DELETE"])
def delete_promotions(promotion_id: int):
    """
    Delete a Promotion by id
    - If the promotion doesn't exist, return 404
    - If exists, delete and return 204
    """
    app.logger.info("Request to delete Promotion with id [%s]", promotion_id)
    promotion = _find_or_404(promotion_id)
    promotion.delete()
    return "", status.HTTP_204_NO_CONTENT


######################################################################
# RENDER a Promotion
######################################################################
@app.route("/promotions/<int:promotion_id>/rendered", methods=["GET"])
def render_promotion(promotion_id: int):
    """
    Render the greeting, content and closing of a Promotion into HTML
    """
    app.logger.info("Request to render Promotion with id [%s]", promotion_id)
    promotion = _find_or_404(promotion_id)
    rendered = promotion.render(app.config["NO_CONTENT_MESSAGE"])
    return (
        jsonify(id=promotion.id, **{k: str(v) for k, v in rendered.items()}),
        status.HTTP_200_OK,
    )


######################################################################
# Content groups of a Promotion
######################################################################
@app.route("/promotions/<int:promotion_id>/groups", methods=["GET"])
def list_content_groups(promotion_id: int):
    """
    List the raw text groups of a Promotion's content
    """
    app.logger.info("Request to list content groups of Promotion [%s]", promotion_id)
    promotion = _find_or_404(promotion_id)
    groups = [group.body for group in text_groups(promotion.content)]
    return (
        jsonify(id=promotion.id, count=len(groups), groups=groups),
        status.HTTP_200_OK,
    )


@app.route("/promotions/<int:promotion_id>/groups/<int(signed=True):index>", methods=["GET"])
def get_content_group(promotion_id: int, index: int):
    """
    Get one raw text group (zero-based) of a Promotion's content
    """
    app.logger.info("Request for content group %s of Promotion [%s]", index, promotion_id)
    promotion = _find_or_404(promotion_id)
    body = get_group(promotion.content, index)
    if body is None:
        abort(
            status.HTTP_404_NOT_FOUND,
            f"Promotion '{promotion_id}' has no content group {index}.",
        )
    return jsonify(id=promotion.id, index=index, body=body), status.HTTP_200_OK


######################################################################
# PREVIEW content markup without storing it
######################################################################
@app.route("/preview", methods=["POST"])
def preview_content():
    """
    Render unsaved greeting / content / closing markup for the admin editor
    """
    app.logger.info("Request to preview content")
    check_content_type("application/json")

    data = request.get_json()
    if not isinstance(data, dict):
        abort(status.HTTP_400_BAD_REQUEST, "Request body must be a JSON object")
    for field in ("greeting", "content", "closing"):
        if data.get(field) is not None and not isinstance(data[field], str):
            abort(status.HTTP_400_BAD_REQUEST, f"Field '{field}' must be a string")

    content = data.get("content")
    return (
        jsonify(
            greeting=str(render_single_block_content(data.get("greeting"))),
            content=str(render_grouped_content(content, app.config["NO_CONTENT_MESSAGE"])),
            closing=str(render_single_block_content(data.get("closing"))),
            group_count=count_groups(content),
        ),
        status.HTTP_200_OK,
    )


######################################################################
# Utility: Content-Type guard
######################################################################
def check_content_type(content_type: str):
    """Checks that the media type is correct (tolerates charset etc.)"""
    if request.mimetype != content_type:
        got = request.content_type or "none"
        abort(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            f"Content-Type must be {content_type}; received {got}",
        )


######################################################################
# Endpoint: /health (K8s liveness/readiness)
######################################################################
@app.route("/health", methods=["GET"])
def health():
    """
    K8s health check endpoint
    Returns:
        JSON: {"status": "OK"} with HTTP 200
    """
    app.logger.info("Health check requested")
    return jsonify(status="OK"), status.HTTP_200_OK

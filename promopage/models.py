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
Models for Promotion pages

A Promotion is a timed landing page document: greeting, body content,
closing, contact details, an optional image and up to four links to other
promotions. The text fields hold raw author markup; rendering lives in
promopage.content.

Query contract: single-item lookups (find, find_by_slug) return
object|None, multi-item lookups return a list.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Union

from flask_sqlalchemy import SQLAlchemy

from promopage.content import (
    NO_CONTENT_MESSAGE,
    render_grouped_content,
    render_single_block_content,
)

logger = logging.getLogger("flask.app")

# SQLAlchemy handle; initialized in promopage/__init__.py
db = SQLAlchemy()

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
MAX_OTHER_PRODUCTS = 4
TEXT_FIELDS = ("target", "greeting", "content", "closing", "contact")


class DataValidationError(Exception):
    """Used for data validation errors when deserializing or updating."""


class DatabaseError(Exception):
    """Used for database operation failures (commit/connection/constraint errors)."""


class Promotion(db.Model):  # pylint: disable=too-many-instance-attributes
    """
    Class that represents a Promotion page
    """

    ##################################################
    # Table Schema
    ##################################################
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(63), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, unique=True)
    target = db.Column(db.String(63), nullable=False, default="")
    greeting = db.Column(db.Text, nullable=False, default="")
    content = db.Column(db.Text, nullable=False, default="")
    closing = db.Column(db.Text, nullable=False, default="")
    contact = db.Column(db.Text, nullable=False, default="")
    short_url = db.Column(db.String(255), nullable=True)
    image_url = db.Column(db.String(1024), nullable=True)
    other_product_ids = db.Column(db.JSON, nullable=False, default=list)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    # Auditing fields
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    last_updated = db.Column(
        db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False
    )

    ##################################################
    # INSTANCE METHODS
    ##################################################

    def __repr__(self):
        return f"<Promotion {self.slug} id=[{self.id}]>"

    def create(self):
        """Creates this Promotion in the database."""
        logger.info("Creating %s", self.slug)
        self.id = None  # make sure id is None so SQLAlchemy will assign one
        try:
            db.session.add(self)
            db.session.flush()
            db.session.commit()
        except Exception as e:  # pragma: no cover - exercised via exception tests
            db.session.rollback()
            logger.error("Error creating record: %s", self)
            raise DatabaseError(e) from e

    def update(self):
        """Updates this Promotion in the database."""
        logger.info("Saving %s", self.slug)
        if not self.id:
            raise DataValidationError("Field 'id' is required for update")
        try:
            db.session.commit()
        except Exception as e:  # pragma: no cover - exercised via exception tests
            db.session.rollback()
            logger.error("Error updating record: %s", self)
            raise DatabaseError(e) from e

    def delete(self):
        """Removes this Promotion from the data store."""
        logger.info("Deleting %s", self.slug)
        try:
            db.session.delete(self)
            db.session.commit()
        except Exception as e:  # pragma: no cover - exercised via exception tests
            db.session.rollback()
            logger.error("Error deleting record: %s", self)
            raise DatabaseError(e) from e

    def is_live(self, on_date: Optional[date] = None) -> bool:
        """True when the promotion is switched on and inside its date window"""
        on_date = on_date or date.today()
        return bool(self.is_active) and self.start_date <= on_date <= self.end_date

    def render(self, empty_message: str = NO_CONTENT_MESSAGE) -> dict:
        """Renders the author markup of every text field into HTML"""
        return {
            "greeting": render_single_block_content(self.greeting),
            "content": render_grouped_content(self.content, empty_message),
            "closing": render_single_block_content(self.closing),
        }

    def serialize(self) -> dict:
        """Serializes a Promotion into a dictionary."""
        return {
            "id": self.id,
            "code": self.code,
            "title": self.title,
            "slug": self.slug,
            "target": self.target,
            "greeting": self.greeting,
            "content": self.content,
            "closing": self.closing,
            "contact": self.contact,
            "short_url": self.short_url,
            "image_url": self.image_url,
            "other_product_ids": list(self.other_product_ids or []),
            "is_active": self.is_active,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }

    def deserialize(self, data: dict):
        """
        Deserializes a Promotion from a dictionary.

        Args:
            data (dict): a dictionary containing the promotion data
        """
        try:
            self.code = _required_str(data, "code")
            self.title = _required_str(data, "title")

            slug = _required_str(data, "slug")
            if not SLUG_PATTERN.match(slug):
                raise DataValidationError(
                    "Field 'slug' may only hold lowercase letters, digits and single hyphens"
                )
            self.slug = slug

            for field in TEXT_FIELDS:
                value = data.get(field)
                if value is None:
                    value = ""
                if not isinstance(value, str):
                    raise DataValidationError(f"Field '{field}' must be a string")
                setattr(self, field, value)

            self.short_url = _optional_str(data, "short_url")
            self.image_url = _optional_str(data, "image_url")
            self.other_product_ids = _product_ids(data.get("other_product_ids"))

            is_active = data.get("is_active", True)
            if not isinstance(is_active, bool):
                raise DataValidationError("Field 'is_active' must be a boolean")
            self.is_active = is_active

            self.start_date = _iso_date(data, "start_date")
            self.end_date = _iso_date(data, "end_date")
            if self.start_date > self.end_date:
                raise DataValidationError("Field 'start_date' must not be after 'end_date'")

        except AttributeError as error:
            # e.g., data is not a dict-like
            raise DataValidationError("Invalid attribute: " + error.args[0]) from error
        except KeyError as error:
            missing = error.args[0]
            raise DataValidationError(f"Invalid promotion: missing '{missing}'") from error
        except TypeError as error:
            raise DataValidationError(
                "Invalid promotion: request body contained malformed or invalid data"
            ) from error

        return self

    ##################################################
    # CLASS METHODS
    ##################################################

    @classmethod
    def all(cls) -> List["Promotion"]:
        """Returns all Promotions in the database (as a list)."""
        logger.info("Processing all Promotions")
        return list(cls.query.all())

    @classmethod
    def remove_all(cls):
        """Deletes every Promotion, used by the test suites"""
        logger.info("Removing all Promotions")
        db.session.query(cls).delete()
        db.session.commit()

    @classmethod
    def find(cls, by_id: Union[int, str]) -> Optional["Promotion"]:
        """Finds a Promotion by its ID (single object or None)."""
        logger.info("Processing lookup for id %s ...", by_id)
        try:
            pid = int(by_id)
        except (TypeError, ValueError):
            return None
        return cls.query.session.get(cls, pid)

    @classmethod
    def find_by_slug(cls, slug: str) -> Optional["Promotion"]:
        """Finds the Promotion published under ``slug`` (single object or None)."""
        logger.info("Processing slug lookup for %s ...", slug)
        return cls.query.filter(cls.slug == slug).first()

    @classmethod
    def find_by_code(cls, code: str) -> List["Promotion"]:
        """Returns all Promotions with the given code (as a list)."""
        logger.info("Processing code query for %s ...", code)
        return list(cls.query.filter(cls.code == code).all())

    @classmethod
    def find_by_target(cls, target: str) -> List["Promotion"]:
        """Returns all Promotions aimed at the given customer group (as a list)."""
        logger.info("Processing target query for %s ...", target)
        return list(cls.query.filter(cls.target == target).all())

    @classmethod
    def find_active(cls, on_date: date | None = None) -> list["Promotion"]:
        """
        Returns all Promotions that are live on the given date (inclusive).
        Live means: is_active and start_date <= on_date <= end_date.
        """
        if on_date is None:
            on_date = date.today()
        return list(
            cls.query.filter(
                cls.is_active.is_(True),
                cls.start_date <= on_date,
                cls.end_date >= on_date,
            ).all()
        )

    @classmethod
    def find_inactive(cls, on_date: date | None = None) -> list["Promotion"]:
        """Returns all Promotions that are not live on the given date."""
        if on_date is None:
            on_date = date.today()
        return list(
            cls.query.filter(
                db.or_(
                    cls.is_active.is_(False),
                    cls.start_date > on_date,
                    cls.end_date < on_date,
                )
            ).all()
        )


######################################################################
#  F I E L D   H E L P E R S
######################################################################
def _required_str(data: dict, field: str) -> str:
    value = data[field]
    if not isinstance(value, str) or not value.strip():
        raise DataValidationError(f"Field '{field}' must be a non-empty string")
    return value.strip()


def _optional_str(data: dict, field: str) -> Optional[str]:
    value = data.get(field)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DataValidationError(f"Field '{field}' must be a string")
    return value


def _product_ids(value) -> List[int]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in value
    ):
        raise DataValidationError("Field 'other_product_ids' must be a list of integers")
    if len(value) > MAX_OTHER_PRODUCTS:
        raise DataValidationError(
            f"Field 'other_product_ids' holds at most {MAX_OTHER_PRODUCTS} entries"
        )
    return list(value)


def _iso_date(data: dict, field: str) -> date:
    try:
        return date.fromisoformat(data[field])
    except KeyError:
        raise
    except Exception as e:
        raise DataValidationError(f"Field '{field}' must be an ISO date (YYYY-MM-DD)") from e

######################################################################
# Copyright 2016, 2024 John J. Rofrano. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# https://www.apache.org/licenses/LICENSE-2.0
######################################################################

"""
Promotion Pages API Service Test Suite
"""

import logging
from unittest import TestCase
from unittest.mock import patch
from datetime import date, timedelta

from wsgi import app
from promopage.common import status
from promopage.models import Promotion, db

BASE_URL = "/promotions"


def make_payload(**overrides) -> dict:
    """Build a valid promotion JSON payload"""
    base = {
        "code": "PR-1001",
        "title": "Spring Sale",
        "slug": "spring-sale",
        "target": "VIP",
        "greeting": "Hello!\nWelcome back",
        "content": "<<Spring>>===see https://example.com here",
        "closing": "Thanks https://example.com/bye",
        "contact": "02-1234-5678",
        "start_date": (date.today() - timedelta(days=1)).isoformat(),
        "end_date": (date.today() + timedelta(days=30)).isoformat(),
    }
    base.update(overrides)
    return base


######################################################################
#  H A P P Y   P A T H S
######################################################################
class TestPromotionService(TestCase):
    """REST API Server Tests"""

    @classmethod
    def setUpClass(cls):
        """Run once before all tests"""
        app.config["TESTING"] = True
        app.config["DEBUG"] = False
        app.logger.setLevel(logging.CRITICAL)
        app.app_context().push()

    @classmethod
    def tearDownClass(cls):
        """Run once after all tests"""
        db.session.close()

    def setUp(self):
        """Runs before each test"""
        self.client = app.test_client()
        db.session.query(Promotion).delete()
        db.session.commit()

    def tearDown(self):
        """Runs after each test"""
        db.session.remove()

    def _create(self, **overrides) -> dict:
        resp = self.client.post(BASE_URL, json=make_payload(**overrides))
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        return resp.get_json()

    # ---------- Home ----------
    def test_index(self):
        """It should call the home page"""
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual(data["name"], "Promotion Pages Service")
        self.assertIn("promotions", data["paths"])

    def test_health(self):
        """It should report healthy"""
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.get_json(), {"status": "OK"})

    # ---------- Create / Read ----------
    def test_create_promotion(self):
        """It should Create a new Promotion"""
        payload = make_payload()
        resp = self.client.post(BASE_URL, json=payload)
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        location = resp.headers.get("Location", None)
        self.assertIsNotNone(location)

        body = resp.get_json()
        self.assertEqual(body["slug"], payload["slug"])
        self.assertEqual(body["content"], payload["content"])
        self.assertTrue(body["is_active"])

        follow = self.client.get(location)
        self.assertEqual(follow.status_code, status.HTTP_200_OK)
        self.assertEqual(follow.get_json()["title"], payload["title"])

    def test_create_duplicate_slug(self):
        """It should refuse a second Promotion with the same slug"""
        self._create()
        resp = self.client.post(BASE_URL, json=make_payload(code="PR-2"))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.get_json()["error"], "Conflict")

    def test_get_promotion_not_found(self):
        """It should return 404 JSON for an unknown id"""
        resp = self.client.get(f"{BASE_URL}/0")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn("was not found", resp.get_json()["message"])

    # ---------- List ----------
    def test_list_all(self):
        """It should list every Promotion"""
        self._create(slug="a")
        self._create(slug="b")
        resp = self.client.get(BASE_URL)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.get_json()), 2)

    def test_list_filters(self):
        """It should filter by id, slug, code and target"""
        first = self._create(slug="first", code="PR-1", target="VIP")
        self._create(slug="second", code="PR-2", target="New customers")

        data = self.client.get(f"{BASE_URL}?id={first['id']}").get_json()
        self.assertEqual([p["slug"] for p in data], ["first"])
        self.assertEqual(self.client.get(f"{BASE_URL}?id=99999999").get_json(), [])

        data = self.client.get(f"{BASE_URL}?slug=second").get_json()
        self.assertEqual([p["slug"] for p in data], ["second"])
        self.assertEqual(self.client.get(f"{BASE_URL}?slug=none").get_json(), [])

        data = self.client.get(f"{BASE_URL}?code=PR-2").get_json()
        self.assertEqual([p["slug"] for p in data], ["second"])

        data = self.client.get(f"{BASE_URL}?target=VIP").get_json()
        self.assertEqual([p["slug"] for p in data], ["first"])

    def test_list_active(self):
        """It should filter live and not live Promotions with ?active="""
        today = date.today()
        self._create(slug="live")
        self._create(
            slug="expired",
            start_date=(today - timedelta(days=10)).isoformat(),
            end_date=(today - timedelta(days=1)).isoformat(),
        )
        data = self.client.get(f"{BASE_URL}?active=true").get_json()
        self.assertEqual([p["slug"] for p in data], ["live"])
        data = self.client.get(f"{BASE_URL}?active=no").get_json()
        self.assertEqual([p["slug"] for p in data], ["expired"])

    def test_list_active_invalid(self):
        """It should reject an invalid ?active= value"""
        resp = self.client.get(f"{BASE_URL}?active=maybe")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("maybe", resp.get_json()["message"])

    # ---------- Update ----------
    def test_update_promotion(self):
        """It should Update an existing Promotion"""
        created = self._create()
        payload = make_payload(title="Summer Sale", content="!!Hot!!")
        resp = self.client.put(f"{BASE_URL}/{created['id']}", json=payload)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        body = resp.get_json()
        self.assertEqual(body["id"], created["id"])
        self.assertEqual(body["title"], "Summer Sale")
        self.assertEqual(body["content"], "!!Hot!!")

    def test_update_not_found(self):
        """It should return 404 when updating an unknown id"""
        resp = self.client.put(f"{BASE_URL}/999999", json=make_payload())
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_id_mismatch(self):
        """It should refuse a body id that disagrees with the path"""
        created = self._create()
        resp = self.client.put(
            f"{BASE_URL}/{created['id']}", json=make_payload(id=created["id"] + 1)
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_bad_data_leaves_record(self):
        """It should reject bad data and keep the stored record"""
        created = self._create()
        resp = self.client.put(
            f"{BASE_URL}/{created['id']}", json=make_payload(title="New", slug="Bad Slug")
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        again = self.client.get(f"{BASE_URL}/{created['id']}").get_json()
        self.assertEqual(again["title"], created["title"])

    def test_update_slug_clash(self):
        """It should refuse to take another Promotion's slug"""
        self._create(slug="taken")
        created = self._create(slug="mine")
        resp = self.client.put(f"{BASE_URL}/{created['id']}", json=make_payload(slug="taken"))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    # ---------- Deactivate / Delete ----------
    def test_deactivate_promotion(self):
        """It should switch a Promotion off and close it at yesterday"""
        yesterday = date.today() - timedelta(days=1)
        created = self._create()
        resp = self.client.put(f"{BASE_URL}/{created['id']}/deactivate")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        body = resp.get_json()
        self.assertFalse(body["is_active"])
        self.assertEqual(body["end_date"], yesterday.isoformat())
        active = self.client.get(f"{BASE_URL}?active=true").get_json()
        self.assertTrue(all(p["id"] != created["id"] for p in active))

    def test_deactivate_never_extends(self):
        """It should not move an earlier end_date forward"""
        much_earlier = date.today() - timedelta(days=10)
        created = self._create(
            start_date=(date.today() - timedelta(days=20)).isoformat(),
            end_date=much_earlier.isoformat(),
        )
        body = self.client.put(f"{BASE_URL}/{created['id']}/deactivate").get_json()
        self.assertEqual(body["end_date"], much_earlier.isoformat())

    def test_deactivate_not_started(self):
        """It should keep the date window valid for a Promotion not started yet"""
        start = date.today() + timedelta(days=5)
        created = self._create(
            start_date=start.isoformat(),
            end_date=(start + timedelta(days=10)).isoformat(),
        )
        body = self.client.put(f"{BASE_URL}/{created['id']}/deactivate").get_json()
        self.assertFalse(body["is_active"])
        self.assertEqual(body["start_date"], start.isoformat())
        self.assertEqual(body["end_date"], start.isoformat())

        resp = self.client.put(f"{BASE_URL}/{created['id']}", json=body)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_delete_promotion(self):
        """It should delete an existing Promotion and return 204"""
        created = self._create()
        resp = self.client.delete(f"{BASE_URL}/{created['id']}")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(resp.data, b"")
        self.assertEqual(
            self.client.get(f"{BASE_URL}/{created['id']}").status_code,
            status.HTTP_404_NOT_FOUND,
        )

    def test_delete_not_found(self):
        """It should return 404 when deleting an unknown id"""
        resp = self.client.delete(f"{BASE_URL}/999999")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    # ---------- Rendering ----------
    def test_rendered_promotion(self):
        """It should render every text field of a Promotion"""
        created = self._create()
        resp = self.client.get(f"{BASE_URL}/{created['id']}/rendered")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual(data["id"], created["id"])
        self.assertTrue(data["greeting"].startswith("Hello!<br>Welcome back"))
        self.assertEqual(data["content"].count('class="content-group"'), 2)
        self.assertIn('<span class="content-subtitle">Spring</span>', data["content"])
        self.assertIn('class="promotion-link"', data["content"])
        self.assertIn('href="https://example.com/bye"', data["closing"])

    def test_rendered_empty_content(self):
        """It should render the no-content message for a blank body"""
        created = self._create(content="")
        data = self.client.get(f"{BASE_URL}/{created['id']}/rendered").get_json()
        self.assertIn(app.config["NO_CONTENT_MESSAGE"], data["content"])
        self.assertNotIn("content-group", data["content"])

    def test_content_groups(self):
        """It should list the raw text groups of a Promotion"""
        created = self._create(content="one === two ===  === three")
        resp = self.client.get(f"{BASE_URL}/{created['id']}/groups")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual(data["count"], 3)
        self.assertEqual(data["groups"], ["one", "two", "three"])

    def test_content_group_by_index(self):
        """It should return one raw group or 404 when it is absent"""
        created = self._create(content="first===second===third")
        url = f"{BASE_URL}/{created['id']}/groups"
        resp = self.client.get(f"{url}/1")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.get_json()["body"], "second")
        for index in (99, -1):
            with self.subTest(index=index):
                resp = self.client.get(f"{url}/{index}")
                self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_preview(self):
        """It should render unsaved markup"""
        resp = self.client.post(
            "/preview",
            json={"content": "a===b===c", "greeting": "hi\nthere", "closing": None},
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual(data["group_count"], 3)
        self.assertEqual(data["content"].count('class="content-separator"'), 2)
        self.assertEqual(data["greeting"], "hi<br>there")
        self.assertEqual(data["closing"], "")

    def test_preview_bad_body(self):
        """It should reject a preview body that is not an object of strings"""
        resp = self.client.post("/preview", json=["content"])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        resp = self.client.post("/preview", json={"content": 12})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


######################################################################
#  S A D   P A T H S
######################################################################
class TestSadPaths(TestCase):
    """Test REST Exception Handling"""

    @classmethod
    def setUpClass(cls):
        """Run once before all tests"""
        app.config["TESTING"] = True
        app.logger.setLevel(logging.CRITICAL)
        app.app_context().push()

    def setUp(self):
        self.client = app.test_client()
        db.session.query(Promotion).delete()  # clean up the last tests
        db.session.commit()

    def tearDown(self):
        """This runs after each test"""
        db.session.remove()

    def test_create_no_content_type(self):
        """It should not Create a Promotion with no content type"""
        resp = self.client.post(BASE_URL, data="not json")
        self.assertEqual(resp.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.assertEqual(resp.get_json()["error"], "Unsupported Media Type")

    def test_create_wrong_content_type(self):
        """It should not Create a Promotion with the wrong content type"""
        resp = self.client.post(BASE_URL, data="hello", content_type="text/html")
        self.assertEqual(resp.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)

    def test_create_missing_field(self):
        """It should not Create a Promotion without a slug"""
        payload = make_payload()
        del payload["slug"]
        resp = self.client.post(BASE_URL, json=payload)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("slug", resp.get_json()["message"])

    def test_method_not_allowed(self):
        """It should not allow an illegal method call"""
        resp = self.client.put(BASE_URL)
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertIn("GET", resp.headers["Allow"])

    @patch("promopage.models.db.session.commit")
    def test_database_error(self, commit_mock):
        """It should hide database failures behind a generic 500"""
        commit_mock.side_effect = Exception("connection lost")
        resp = self.client.post(BASE_URL, json=make_payload())
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.get_json()["message"], "An unexpected error occurred.")

"""Step definitions for the promotion page BDD checks.

Background data is loaded through the REST API with requests; everything
after that is checked in the browser.
"""

from datetime import date, timedelta

import requests
from behave import given, when, then
from selenium.webdriver.common.by import By

WAIT_SECONDS = 10


@given("the following promotions")
def step_load_promotions(context):
    """Delete every promotion and load the ones from the table"""
    rest_endpoint = f"{context.base_url}/promotions"
    resp = requests.get(rest_endpoint, timeout=WAIT_SECONDS)
    assert resp.status_code == 200
    for promotion in resp.json():
        resp = requests.delete(f"{rest_endpoint}/{promotion['id']}", timeout=WAIT_SECONDS)
        assert resp.status_code == 204

    today = date.today()
    for row in context.table:
        offset = int(row["ends_in_days"])
        payload = {
            "code": row["code"],
            "title": row["title"],
            "slug": row["slug"],
            "content": row["content"].replace("\\n", "\n"),
            "start_date": (today - timedelta(days=30)).isoformat(),
            "end_date": (today + timedelta(days=offset)).isoformat(),
        }
        resp = requests.post(rest_endpoint, json=payload, timeout=WAIT_SECONDS)
        assert resp.status_code == 201


@given("the Promotions UI is available")
def step_ui_is_available(context):
    """Navigate to the /ui page and ensure basic content is present."""
    context.browser.get(context.base_url + "/ui")
    assert "Promotions Admin" in context.browser.page_source


@when('I visit the landing page "{slug}"')
def step_visit_landing_page(context, slug):
    context.browser.get(f"{context.base_url}/p/{slug}")


@then('I should see "{text}" in the admin list')
def step_see_in_admin_list(context, text):
    table = context.browser.find_element(By.ID, "promotions")
    assert text in table.text


@then('I should see the page title "{text}"')
def step_see_title(context, text):
    assert context.browser.find_element(By.ID, "title").text == text


@then('I should see a "{css_class}" block reading "{text}"')
def step_see_block(context, css_class, text):
    elements = context.browser.find_elements(By.CLASS_NAME, css_class)
    assert any(element.text == text for element in elements), (
        f"no .{css_class} reading {text!r}"
    )


@then('I should see {count:d} content groups')
def step_count_groups(context, count):
    groups = context.browser.find_elements(By.CLASS_NAME, "content-group")
    assert len(groups) == count


@then('I should see "{text}"')
def step_see_text(context, text):
    body = context.browser.find_element(By.TAG_NAME, "body")
    assert text in body.text

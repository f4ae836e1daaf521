"""Behave environment hooks for the promotion page BDD checks.

A headless Chrome/Chromium browser is started before the features run and
shut down afterwards. A system chromedriver is used when one is installed,
otherwise Selenium Manager resolves a driver.

BASE_URL is taken in this order:
  1) env:      BASE_URL
  2) behave:   -D BASE_URL=...
  3) default:  http://localhost:8080
"""

import os
import shutil
from typing import Optional

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService


def _find_executable(env_name: str, *candidates: str) -> Optional[str]:
    """Return the path named by ``env_name`` or the first candidate found."""
    env_path = os.getenv(env_name)
    if env_path and os.path.exists(env_path):
        return env_path
    for cand in candidates:
        path = cand if os.path.isabs(cand) else shutil.which(cand)
        if path and os.path.exists(path):
            return path
    return None


def before_all(context):
    """Start a headless browser and remember the base URL."""
    context.base_url = (
        os.getenv("BASE_URL")
        or context.config.userdata.get("BASE_URL")
        or "http://localhost:8080"
    ).rstrip("/")

    options = ChromeOptions()
    options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")

    chrome_bin = _find_executable(
        "CHROME_BIN", "/usr/bin/chromium", "/usr/bin/google-chrome", "chromium", "google-chrome"
    )
    if chrome_bin:
        options.binary_location = chrome_bin

    driver_path = _find_executable(
        "CHROMEDRIVER", "/usr/bin/chromedriver", "/usr/lib/chromium/chromedriver", "chromedriver"
    )
    if driver_path:
        context.browser = webdriver.Chrome(
            service=ChromeService(executable_path=driver_path), options=options
        )
    else:
        context.browser = webdriver.Chrome(options=options)
    context.browser.set_window_size(1400, 1000)


def after_all(context):
    """Shut down the browser if it was started."""
    browser = getattr(context, "browser", None)
    if browser:
        browser.quit()

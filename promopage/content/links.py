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
Link Detector

Finds bare http(s) URLs in guarded text and makes them read as links even
where the display context strips the default hyperlink look.
"""

import re
from enum import Enum

from promopage.content.tag_guard import SENTINELS

LINK_CLASS = "promotion-link"
LINK_STYLE = "font-weight: bold; text-decoration: underline;"

# a URL run ends at whitespace, an HTML-significant character or a marker
URL_PATTERN = re.compile(r"https?://[^\s<>\"'" + SENTINELS + r"]+", re.IGNORECASE)


class LinkStyle(Enum):
    """Output modes of the link detector"""

    SPAN = "span"  # styled inline span, used in grouped content
    ANCHOR = "anchor"  # clickable anchor opening a new tab, used in greeting/closing


def _as_span(url: str) -> str:
    return f'<span class="{LINK_CLASS}" style="{LINK_STYLE}">{url}</span>'


def _as_anchor(url: str) -> str:
    return (
        f'<a href="{url}" target="_blank" rel="noopener noreferrer" '
        f'class="{LINK_CLASS}" style="{LINK_STYLE}">{url}</a>'
    )


_WRAPPERS = {
    LinkStyle.SPAN: _as_span,
    LinkStyle.ANCHOR: _as_anchor,
}


def detect_links(guarded: str, style: LinkStyle = LinkStyle.SPAN) -> str:
    """
    Wraps every bare URL of ``guarded`` in the given link style

    Args:
        guarded (str): text whose literal tags are already hidden behind markers
        style (LinkStyle): which wrapper to emit

    Returns:
        the text with each URL wrapped once
    """
    wrap = _WRAPPERS[style]
    return URL_PATTERN.sub(lambda match: wrap(match.group(0)), guarded)

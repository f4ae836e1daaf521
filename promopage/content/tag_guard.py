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
Tag Guard

Hides literal HTML tags behind opaque markers so that the regex based
rewrites of the content pipeline never see tag text (attribute URLs,
attribute quotes, etc.), and puts the tags back afterwards.

A marker is ``MARKER_OPEN + <index> + MARKER_CLOSE``. Both sentinels are
Unicode private-use characters, so no other stage can match them.

Known limitation: the tag pattern is attribute-unaware and ends a tag at
the first ``>``. A tag like ``<img alt="a > b">`` is cut short and the
remainder is treated as plain text by the later stages.
Group splitting also runs before guarding, so ``===`` inside an attribute
splits the tag (see promopage.content.groups).
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Tuple

logger = logging.getLogger("flask.app")

MARKER_OPEN = "\ue000"
MARKER_CLOSE = "\ue001"
SENTINELS = MARKER_OPEN + MARKER_CLOSE

# generic "<" through the next ">"; stray sentinels are guarded as well
TAG_PATTERN = re.compile(r"<[^>]*>|[" + SENTINELS + r"]")
MARKER_PATTERN = re.compile(MARKER_OPEN + r"(\d+)" + MARKER_CLOSE)


@dataclass(frozen=True)
class TagPlaceholder:
    """A marker token and the exact tag text it stands in for"""

    marker: str
    tag: str


def make_marker(index: int) -> str:
    """Returns the marker token for the placeholder at ``index``"""
    return f"{MARKER_OPEN}{index}{MARKER_CLOSE}"


def protect(text: str) -> Tuple[str, List[TagPlaceholder]]:
    """
    Replaces every HTML tag in ``text`` with a marker

    Args:
        text (str): content that may contain literal HTML

    Returns:
        the guarded text and the ordered placeholders, where the
        placeholder at position ``n`` owns marker ``n``
    """
    placeholders: List[TagPlaceholder] = []

    def _guard(match: re.Match) -> str:
        marker = make_marker(len(placeholders))
        placeholders.append(TagPlaceholder(marker, match.group(0)))
        return marker

    guarded = TAG_PATTERN.sub(_guard, text or "")
    if placeholders:
        logger.debug("Guarded %d tag(s)", len(placeholders))
    return guarded, placeholders


def restore(guarded: str, placeholders: List[TagPlaceholder]) -> str:
    """
    Puts the original tags back in place of their markers

    Each placeholder is restored exactly once. A placeholder whose marker is
    no longer present cannot be restored and its tag is dropped.
    """
    if not placeholders:
        return guarded

    restored = set()

    def _unguard(match: re.Match) -> str:
        index = int(match.group(1))
        if index >= len(placeholders) or index in restored:
            return match.group(0)
        restored.add(index)
        return placeholders[index].tag

    text = MARKER_PATTERN.sub(_unguard, guarded)
    if len(restored) != len(placeholders):
        missing = [p.tag for i, p in enumerate(placeholders) if i not in restored]
        logger.warning("Could not restore %d tag(s): %s", len(missing), missing)
    return text

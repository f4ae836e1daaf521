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
Group Splitter

Splits promotion content into top-level groups on runs of three or more
``=``, so ``=====`` is one break like ``===``.

    "a === b ===  === c"  ->  group-1 "a", separator-1, group-2 "b", separator-2, group-3 "c"

Empty segments produce neither a group nor a separator. The splitter only
works on raw content; rendering of the group bodies happens elsewhere.

Known limitation: splitting runs before tags are guarded, so a ``===`` inside
a tag attribute (``<img alt="a===b">``) cuts the tag across two groups.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger("flask.app")

GROUP_SEPARATOR_PATTERN = re.compile(r"={3,}")

TEXT = "text"
SEPARATOR = "separator"


@dataclass(frozen=True)
class ContentGroup:
    """One entry of the split content, in document order"""

    id: str
    kind: str
    body: str = ""

    @property
    def is_text(self) -> bool:
        """True for a text group, False for a synthetic separator"""
        return self.kind == TEXT


def split_groups(content: Optional[str]) -> List[ContentGroup]:
    """
    Splits raw content into text groups with separators between them

    Args:
        content (str): raw promotion content, ``None`` is treated as empty

    Returns:
        the groups in document order; empty for blank content
    """
    if not content:
        return []

    parts = [part.strip() for part in GROUP_SEPARATOR_PATTERN.split(content)]
    parts = [part for part in parts if part]

    groups: List[ContentGroup] = []
    for number, part in enumerate(parts, start=1):
        if groups:
            groups.append(ContentGroup(f"separator-{number - 1}", SEPARATOR))
        groups.append(ContentGroup(f"group-{number}", TEXT, part))

    logger.debug("Split content into %d group(s)", len(parts))
    return groups


def text_groups(content: Optional[str]) -> List[ContentGroup]:
    """Returns only the text groups of ``content``"""
    return [group for group in split_groups(content) if group.is_text]


def count_groups(content: Optional[str]) -> int:
    """Returns the number of text groups in ``content``"""
    return len(text_groups(content))


def get_group(content: Optional[str], index: int) -> Optional[str]:
    """
    Returns the raw body of the text group at ``index`` (zero-based)

    Returns None when the index is out of range, negative included.
    """
    groups = text_groups(content)
    if 0 <= index < len(groups):
        return groups[index].body
    return None

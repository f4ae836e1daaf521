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
Promotion content renderer

Turns author-written content into HTML for the landing page. The stages
are not commutative; ``render_unit`` is the only place that orders them:

    1. decode ``&lt;`` / ``&gt;``
    2. ``<<subtitle>>`` decoration (before guarding, it uses angle brackets)
    3. guard literal HTML tags
    4. ``[[ ]]`` ``!! !!`` ``"" ""`` decorations
    5. ``---`` ``===`` ``...`` rule blocks
    6. bare URL detection
    7. newline to ``<br>`` (single block content only)
    8. restore the guarded tags

Two entry points:

* ``render_grouped_content`` for the promotion body, split on ``===``
* ``render_single_block_content`` for greeting and closing text

Both return ``Markup`` because the author is trusted and the result is meant
to be placed into a template as-is.
"""

import re
from typing import Optional

from markupsafe import Markup, escape

from promopage.content.decorations import decode_entities, decorate_angles, decorate_brackets
from promopage.content.groups import split_groups
from promopage.content.links import LinkStyle, detect_links
from promopage.content.structural import transform_structural
from promopage.content.tag_guard import protect, restore

NO_CONTENT_MESSAGE = "내용이 없습니다."

NEWLINE_PATTERN = re.compile(r"\r?\n")

GROUP_TEMPLATE = (
    '<div class="content-group" data-group-id="{id}">'
    '<div class="group-content">{body}</div>'
    "</div>"
)
SEPARATOR_BLOCK = (
    '<div class="content-separator">'
    '<div class="separator-line"></div>'
    '<div class="separator-line"></div>'
    "</div>"
)


def render_unit(text: str, link_style: LinkStyle, line_breaks: bool = False) -> str:
    """
    Runs one content unit (a group or a whole greeting) through the pipeline

    Args:
        text (str): raw content of the unit
        link_style (LinkStyle): how bare URLs are wrapped
        line_breaks (bool): convert newlines outside tags into ``<br>``

    Returns:
        the rendered HTML as a plain string
    """
    text = decode_entities(text)
    text = decorate_angles(text)

    guarded, placeholders = protect(text)
    guarded = decorate_brackets(guarded)
    guarded = transform_structural(guarded)
    guarded = detect_links(guarded, link_style)
    if line_breaks:
        guarded = NEWLINE_PATTERN.sub("<br>", guarded)

    return restore(guarded, placeholders)


def render_grouped_content(
    content: Optional[str], empty_message: str = NO_CONTENT_MESSAGE
) -> Markup:
    """
    Renders the promotion body

    Every text group is wrapped in a ``content-group`` block and a
    ``content-separator`` block sits between consecutive groups. Blank
    content renders a single "no content" paragraph instead.
    """
    groups = split_groups(content)
    if not groups:
        return Markup('<p class="text-muted-foreground no-content">{}</p>').format(
            empty_message
        )

    blocks = []
    for group in groups:
        if group.is_text:
            body = render_unit(group.body, LinkStyle.SPAN)
            blocks.append(GROUP_TEMPLATE.format(id=escape(group.id), body=body))
        else:
            blocks.append(SEPARATOR_BLOCK)

    return Markup(
        '<div class="promotion-content-container">\n'
        + "\n".join(blocks)
        + "\n</div>"
    )


def render_single_block_content(content: Optional[str]) -> Markup:
    """
    Renders greeting or closing text

    No grouping; URLs become real anchors and newlines become ``<br>``.
    """
    if not content:
        return Markup("")
    return Markup(render_unit(content, LinkStyle.ANCHOR, line_breaks=True))

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
Inline decoration markup

    <<text>>    subtitle
    [[text]]    reference
    !!text!!    warning
    ""text""    supplementary info

Each form becomes a ``<span>`` with a fixed class. Matching is non-greedy,
stays on one line and never crosses a guarded tag. Unbalanced delimiters
are left alone.
"""

import re

from promopage.content.tag_guard import SENTINELS

SUBTITLE_CLASS = "content-subtitle"
REFERENCE_CLASS = "content-reference"
WARNING_CLASS = "content-warning"
INFO_CLASS = "content-info"

# "<<" and ">>" look like tag syntax, so the body may not hold angle brackets
ANGLE_PATTERN = re.compile(r"<<([^<>\n]+?)>>")

BRACKET_PATTERNS = [
    (re.compile(r"\[\[([^\n" + SENTINELS + r"]+?)\]\]"), REFERENCE_CLASS),
    (re.compile(r"!!([^\n" + SENTINELS + r"]+?)!!"), WARNING_CLASS),
    (re.compile(r'""([^\n' + SENTINELS + r']+?)""'), INFO_CLASS),
]


def _span(css_class: str) -> str:
    return f'<span class="{css_class}">\\1</span>'


def decode_entities(text: str) -> str:
    """Decodes over-escaped angle brackets pasted from a rich editor"""
    return text.replace("&lt;", "<").replace("&gt;", ">")


def decorate_angles(text: str) -> str:
    """
    Rewrites ``<<text>>`` into a subtitle span

    Must run before tag guarding: the generic tag pattern would otherwise
    take ``<<text>`` for a tag.
    """
    return ANGLE_PATTERN.sub(_span(SUBTITLE_CLASS), text)


def decorate_brackets(guarded: str) -> str:
    """
    Rewrites ``[[ ]]``, ``!! !!`` and ``"" ""`` into styled spans

    Expects guarded text, so quotes and brackets inside tag attributes are
    already hidden.
    """
    for pattern, css_class in BRACKET_PATTERNS:
        guarded = pattern.sub(_span(css_class), guarded)
    return guarded


def decorate(text: str) -> str:
    """Applies all four decorations to text that holds no literal tags"""
    return decorate_brackets(decorate_angles(text))

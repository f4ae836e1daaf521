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
Structural tokens

Character runs that turn into block level separators:

    ---   (3+ hyphens)        thick rule
    ===   (3+ equals signs)   thick rule
    ...   (3+ periods)        thin dotted separator
"""

import re

THICK_RULE = (
    '<div class="horizontal-separator">'
    '<div class="separator-line"></div>'
    '<div class="separator-line"></div>'
    "</div>"
)
DOTTED_RULE = '<div class="dotted-separator"></div>'

STRUCTURAL_PATTERNS = [
    (re.compile(r"-{3,}"), THICK_RULE),
    (re.compile(r"[ \t]*={3,}"), THICK_RULE),
    (re.compile(r"\.{3,}"), DOTTED_RULE),
]


def transform_structural(guarded: str) -> str:
    """Replaces rule-like character runs in guarded text with separator blocks"""
    for pattern, block in STRUCTURAL_PATTERNS:
        guarded = pattern.sub(block, guarded)
    return guarded

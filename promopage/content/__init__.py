"""
Package: content
Markup rendering for promotion content fields
"""

from promopage.content.groups import (
    ContentGroup,
    count_groups,
    get_group,
    split_groups,
    text_groups,
)
from promopage.content.links import LinkStyle
from promopage.content.renderer import (
    NO_CONTENT_MESSAGE,
    render_grouped_content,
    render_single_block_content,
    render_unit,
)

__all__ = [
    "ContentGroup",
    "LinkStyle",
    "NO_CONTENT_MESSAGE",
    "count_groups",
    "get_group",
    "render_grouped_content",
    "render_single_block_content",
    "render_unit",
    "split_groups",
    "text_groups",
]

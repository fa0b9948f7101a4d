"""ART19 tool translators.

Importing this package registers every tool and checks the registry against
``TOOL_NAMES``, so a tool declared without a handler fails at startup.
"""
from __future__ import annotations

from . import credits, episodes, feed_items, images, markers, people, series, versions  # noqa: F401
from .registry import ToolRegistry, ToolSpec, registry

TOOL_NAMES = (
    # series & seasons
    "list_series",
    "get_series",
    "list_seasons",
    "get_season",
    # episodes
    "list_episodes",
    "get_episode",
    "create_episode",
    "update_episode",
    "publish_episode",
    "unpublish_episode",
    "delete_episode",
    "get_episode_next_sibling",
    "get_episode_previous_sibling",
    # credits & people
    "list_credits",
    "add_credit",
    "update_credit",
    "remove_credit",
    "search_people",
    "get_person",
    "create_person",
    # audio
    "list_episode_versions",
    "get_episode_version",
    "create_episode_version",
    "update_episode_version",
    "delete_episode_version",
    "list_media_assets",
    "list_marker_points",
    "create_marker_point",
    "delete_marker_point",
    # artwork
    "list_images",
    "upload_image",
    # feed items
    "list_feed_items",
    "get_feed_item",
    "create_feed_item",
    "update_feed_item",
    "delete_feed_item",
)

registry.validate(TOOL_NAMES)

__all__ = ["TOOL_NAMES", "ToolRegistry", "ToolSpec", "registry"]

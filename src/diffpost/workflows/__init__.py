"""End-to-end workflows composed from the splitter and delivery client."""

from __future__ import annotations

from diffpost.workflows.post_comments import (
    PostRequest,
    post_diff_comments,
    read_document,
)

__all__ = ["PostRequest", "post_diff_comments", "read_document"]

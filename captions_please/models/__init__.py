"""Pydantic models for captions_please."""

from captions_please.models.activity import (
    ActivityJob,
    ActivityNotification,
    ActivityResult,
    ReplyResult,
)
from captions_please.models.directive import Action, Directive
from captions_please.models.post import Author, Media, MediaType, Mention, Post, PostKind
from captions_please.models.response import MediaResponse, ResponseKind

__all__ = [
    "ActivityJob",
    "ActivityNotification",
    "ActivityResult",
    "ReplyResult",
    "Action",
    "Directive",
    "Author",
    "Media",
    "MediaType",
    "Mention",
    "Post",
    "PostKind",
    "MediaResponse",
    "ResponseKind",
]

"""Pydantic schemas for Repository and Member catalog rows."""

import re
from datetime import datetime

from pydantic import Field

from .base import SchemaBase

_REPO_PART = re.compile(r"^[A-Za-z0-9_.-]+$")


def parse_repo_string(value: str) -> tuple[str, str]:
    """Split an "owner/name" string.

    Args:
        value: Repository in owner/name form (e.g., "octocat/hello-world")

    Returns:
        Tuple of (owner, name)

    Raises:
        ValueError: If the string is not exactly two non-empty path segments
    """
    parts = value.strip().split("/")
    if len(parts) != 2 or not all(_REPO_PART.match(part) for part in parts):
        raise ValueError(f"Invalid repository '{value}', expected owner/name")
    return parts[0], parts[1]


class RepositoryCreate(SchemaBase):
    """Schema for registering a repository."""

    owner: str = Field(min_length=1, max_length=100, description="GitHub org or user")
    name: str = Field(min_length=1, max_length=100, description="Repository name")
    url: str | None = Field(default=None, max_length=500, description="Repository web URL")

    @classmethod
    def from_full_name(cls, full_name: str, url: str | None = None) -> "RepositoryCreate":
        """Build from an "owner/name" string."""
        owner, name = parse_repo_string(full_name)
        return cls(owner=owner, name=name, url=url)


class RepositoryRead(SchemaBase):
    """Schema for reading repository data."""

    id: int
    owner: str
    name: str
    url: str
    created_at: datetime


class MemberRead(SchemaBase):
    """Schema for reading member data."""

    id: int
    username: str
    display_name: str | None

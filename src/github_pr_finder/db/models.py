"""SQLAlchemy ORM models for the local pull request cache."""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class PRState(str, Enum):
    """Pull request state as stored in the cache."""

    OPEN = "open"
    MERGED = "merged"
    CLOSED = "closed"  # closed without merge


class SettingKey(str, Enum):
    """Well-known keys of the settings table."""

    GITHUB_ACCESS_TOKEN = "github_access_token"


# ------------------------------------------------------------------------------
# Repository model
# ------------------------------------------------------------------------------
class Repository(Base):
    """Registered GitHub repository."""

    __tablename__ = "repositories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))  # e.g., "hello-world"
    owner: Mapped[str] = mapped_column(String(100))  # e.g., "octocat"
    url: Mapped[str] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    pull_requests: Mapped[list["PullRequest"]] = relationship(
        back_populates="repository",
        cascade="all, delete-orphan",
    )

    __table_args__ = (UniqueConstraint("owner", "name", name="uq_repo_owner_name"),)

    @property
    def full_name(self) -> str:
        """Repository path in owner/name form."""
        return f"{self.owner}/{self.name}"

    def __repr__(self) -> str:
        return f"<Repository(id={self.id}, full_name='{self.full_name}')>"


# ------------------------------------------------------------------------------
# Member model
# ------------------------------------------------------------------------------
class Member(Base):
    """Team member, identified by GitHub login."""

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True)
    display_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    @property
    def label(self) -> str:
        """Display name when set, GitHub login otherwise."""
        return self.display_name or self.username

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, username='{self.username}')>"


# ------------------------------------------------------------------------------
# PullRequest model
# ------------------------------------------------------------------------------
class PullRequest(Base):
    """Cached pull request row.

    Keyed by (repository_id, pr_number). Every field except the primary key
    is overwritten when the PR is synced again. `author` refers to
    Member.username by value only.
    """

    __tablename__ = "pull_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    pr_number: Mapped[int] = mapped_column()
    repository_id: Mapped[int] = mapped_column(ForeignKey("repositories.id", ondelete="CASCADE"))

    title: Mapped[str] = mapped_column(String(500))
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    author: Mapped[str] = mapped_column(String(100), index=True)
    state: Mapped[PRState] = mapped_column(default=PRState.OPEN)

    # GitHub timestamps (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime)
    merged_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    html_url: Mapped[str] = mapped_column(String(500))
    diff_url: Mapped[str] = mapped_column(String(500))
    diff_content: Mapped[str | None] = mapped_column(Text, nullable=True)

    repository: Mapped["Repository"] = relationship(back_populates="pull_requests")

    __table_args__ = (UniqueConstraint("repository_id", "pr_number", name="uq_repo_pr_number"),)

    def __repr__(self) -> str:
        return (
            f"<PullRequest(id={self.id}, repo='{self.repository_id}', "
            f"pr_number={self.pr_number})>"
        )

    @property
    def has_diff(self) -> bool:
        """Check if a diff was stored for this PR."""
        return bool(self.diff_content)


# ------------------------------------------------------------------------------
# Setting model
# ------------------------------------------------------------------------------
class Setting(Base):
    """Flat key/value setting (credentials and preferences)."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    key: Mapped[str] = mapped_column(String(100), unique=True)
    value: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Setting(key='{self.key}')>"

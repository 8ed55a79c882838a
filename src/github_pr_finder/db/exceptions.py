"""Catalog (repository and member) exceptions."""


class CatalogError(Exception):
    """Base exception for catalog write errors."""

    pass


class DuplicateRepositoryError(CatalogError):
    """Raised when registering an owner/name pair that already exists."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(f"Repository {owner}/{name} is already registered")
        self.owner = owner
        self.name = name


class DuplicateMemberError(CatalogError):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Member {username} is already registered")
        self.username = username

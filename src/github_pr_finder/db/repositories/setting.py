"""Credential store: key/value rows of the settings table."""

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from github_pr_finder.db.models import Setting, SettingKey

from .base import BaseRepository


class SettingRepository(BaseRepository[Setting]):
    """Repository for flat key/value settings.

    The GitHub personal access token is stored under
    `SettingKey.GITHUB_ACCESS_TOKEN`.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Setting)

    async def get_value(self, key: str) -> str | None:
        """Get the value stored for `key`.

        Returns:
            The stored value, or None when missing or empty
        """
        setting = await self._get_by_field("key", key)
        if setting is None or not setting.value:
            return None
        return setting.value

    async def set_value(self, key: str, value: str) -> Setting:
        """Insert or replace the value for `key`, refreshing updated_at."""
        setting = await self._get_by_field("key", key)
        if setting is None:
            setting = self.add(Setting(key=key, value=value))
        else:
            setting.value = value
            setting.updated_at = datetime.now(UTC)
        await self.flush()
        return setting

    async def delete(self, key: str) -> bool:
        """Remove `key`. Returns True if a row was deleted."""
        setting = await self._get_by_field("key", key)
        if setting is None:
            return False
        await self._session.delete(setting)
        await self.flush()
        return True

    # -------------------------------------------------------------------------
    # GitHub token
    # -------------------------------------------------------------------------

    async def get_github_token(self) -> str | None:
        return await self.get_value(SettingKey.GITHUB_ACCESS_TOKEN.value)

    async def set_github_token(self, token: str) -> Setting:
        return await self.set_value(SettingKey.GITHUB_ACCESS_TOKEN.value, token.strip())

    async def clear_github_token(self) -> bool:
        return await self.delete(SettingKey.GITHUB_ACCESS_TOKEN.value)

"""Per-user editing session: history, save status and builder theme."""

from app_builder.schemas.design_config import DesignConfig
from app_builder.services.history import HistoryStack
from app_builder.services.persistence import (
    BuilderTheme,
    PersistedState,
    PersistenceAdapter,
    SaveStatus,
)


class BuilderSession:
    """One user's history plus the adapter that persists it.

    Without an adapter (unit tests, previews of throwaway configs) changes
    only live in memory and the save status stays ``unsaved`` after an edit.
    """

    def __init__(
        self,
        user_id: str,
        history: HistoryStack,
        persistence: PersistenceAdapter | None = None,
        builder_theme: BuilderTheme = BuilderTheme.DEFAULT,
    ):
        self.user_id = user_id
        self.history = history
        self.persistence = persistence
        self.builder_theme = builder_theme
        self._status = SaveStatus.SAVED

    @property
    def config(self) -> DesignConfig:
        return self.history.current

    @property
    def save_status(self) -> SaveStatus:
        if self.persistence is not None:
            return self.persistence.status
        return self._status

    def commit(self, config: DesignConfig) -> int:
        previous = self.history.cursor
        cursor = self.history.commit(config)
        if cursor != previous:
            self._changed()
        return cursor

    def undo(self) -> DesignConfig | None:
        config = self.history.undo()
        if config is not None:
            self._changed()
        return config

    def redo(self) -> DesignConfig | None:
        config = self.history.redo()
        if config is not None:
            self._changed()
        return config

    def _changed(self) -> None:
        self._status = SaveStatus.UNSAVED
        if self.persistence is None:
            return
        self.persistence.mark_unsaved()
        self.persistence.schedule(PersistedState.from_history(self.history))

    async def set_builder_theme(self, theme: BuilderTheme) -> bool:
        self.builder_theme = theme
        if self.persistence is None:
            return True
        return await self.persistence.save_builder_theme(theme)

    async def flush(self) -> None:
        if self.persistence is not None:
            await self.persistence.flush()

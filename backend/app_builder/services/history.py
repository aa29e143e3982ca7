"""Undo/redo history over DesignConfig snapshots.

Snapshots are compared by a SHA-256 digest of their canonical JSON, so a
commit of a structurally equal config is a no-op no matter how it was built.
"""

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass, field

from app_builder.schemas.design_config import DesignConfig


def snapshot_digest(config: DesignConfig) -> str:
    payload = config.model_dump_json(by_alias=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class HistoryEntry:
    config: DesignConfig
    digest: str = field(default="", compare=False)

    @classmethod
    def of(cls, config: DesignConfig) -> "HistoryEntry":
        return cls(config=config, digest=snapshot_digest(config))


class HistoryStack:
    def __init__(self, configs: Sequence[DesignConfig], cursor: int | None = None):
        if not configs:
            raise ValueError("history needs at least one snapshot")
        self._entries = [HistoryEntry.of(c) for c in configs]
        self._cursor = len(self._entries) - 1 if cursor is None else cursor
        if not 0 <= self._cursor < len(self._entries):
            raise ValueError(f"cursor {self._cursor} out of range")

    @classmethod
    def seeded(cls, config: DesignConfig) -> "HistoryStack":
        return cls([config], cursor=0)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> DesignConfig:
        return self._entries[self._cursor].config

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def configs(self) -> list[DesignConfig]:
        return [e.config for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def commit(self, config: DesignConfig) -> int:
        """Append ``config`` after the cursor, pruning any redo branch.

        Returns the cursor. Committing a config equal to the current entry
        leaves both the stack and the cursor untouched.
        """
        entry = HistoryEntry.of(config)
        if entry.digest == self._entries[self._cursor].digest:
            return self._cursor
        del self._entries[self._cursor + 1 :]
        self._entries.append(entry)
        self._cursor = len(self._entries) - 1
        return self._cursor

    def undo(self) -> DesignConfig | None:
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self.current

    def redo(self) -> DesignConfig | None:
        if not self.can_redo:
            return None
        self._cursor += 1
        return self.current

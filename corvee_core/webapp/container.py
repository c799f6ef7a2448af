from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Optional, TypeVar

from ..config import DEFAULT_CONFIG_PATH, Config
from ..localization import Localizer
from ..service import CoreService, open_session

T = TypeVar("T")


@dataclass(slots=True)
class ContainerSettings:
    config_path: Path = DEFAULT_CONFIG_PATH
    roster_path: Optional[Path] = None


class ServiceContainer:
    """Holds the shared configuration and the single in-memory session."""

    def __init__(
        self,
        config_path: Path | str | None = None,
        roster_path: Path | str | None = None,
        *,
        config: Config | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        cfg_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.settings = ContainerSettings(
            config_path=cfg_path,
            roster_path=Path(roster_path) if roster_path else None,
        )
        self._lock = RLock()
        self._today = today
        self.config: Config = config or Config.load(path=self.settings.config_path, env=os.environ)
        self.service: CoreService = open_session(self.config, roster=self.settings.roster_path, today=today)
        self.localizer = Localizer(self.config.general.default_locale)

    @property
    def config_path(self) -> Path:
        return self.settings.config_path

    def read(self, func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        with self._lock:
            return func(*args, **kwargs)

    def mutate(self, func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        with self._lock:
            return func(*args, **kwargs)

    def export_roster(self, path: Path | str | None = None) -> Path:
        with self._lock:
            return self.service.export_roster(path)

    def import_roster(self, path: Path | str) -> Path:
        with self._lock:
            target = self.service.import_roster(path)
            self.settings.roster_path = target
            return target

    def undo(self) -> str:
        with self._lock:
            snapshot = self.service.repository.undo()
            return snapshot.label


__all__ = ["ServiceContainer", "ContainerSettings"]

import json
import logging
import time
from pathlib import Path
from typing import Callable, NamedTuple

from bloodq.constants import (
    DEFAULT_PROVIDER,
    MAX_IMAGES_PER_DAY,
    PROVIDERS,
    SETTINGS_STORE_PATH,
    USAGE_STORE_PATH,
    USAGE_WINDOW_MS,
)

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


class JsonStore:

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def _read(self) -> dict | None:
        match self._path.exists():
            case True:
                try:
                    with open(self._path) as f:
                        raw = json.load(f)
                    match raw:
                        case dict():
                            return raw
                        case _:
                            logger.warning(f"{self._path.name} is not an object, using defaults")
                except Exception as e:
                    logger.warning(f"Store load failed: {e}, using defaults")
            case False:
                pass
        return None

    def _write(self, data: dict) -> None:
        try:
            with open(self._path, "w") as f:
                json.dump(data, f, indent=2)
        except Exception as e:
            logger.warning(f"Store save failed: {e}")


class SettingsStore(JsonStore):
    """API keys per provider plus the preferred provider."""

    def __init__(self, path: Path = Path(SETTINGS_STORE_PATH)) -> None:
        super().__init__(path)

    def load(self) -> dict:
        raw = self._read() or {}
        keys = raw.get("apiKeys")
        preferred = raw.get("preferredProvider")
        return {
            "apiKeys": {k: v for k, v in keys.items() if isinstance(v, str)} if isinstance(keys, dict) else {},
            "preferredProvider": preferred if preferred in PROVIDERS else DEFAULT_PROVIDER,
        }

    def save_api_key(self, provider: str, api_key: str) -> None:
        settings = self.load()
        settings["apiKeys"] = {**settings["apiKeys"], provider: api_key}
        self._write(settings)

    def get_api_key(self, provider: str) -> str | None:
        return self.load()["apiKeys"].get(provider)

    def set_preferred_provider(self, provider: str) -> None:
        settings = self.load()
        settings["preferredProvider"] = provider
        self._write(settings)

    def get_preferred_provider(self) -> str:
        return self.load()["preferredProvider"]

    def has_any_api_key(self) -> bool:
        return bool(self.available_providers())

    def has_provider_api_key(self, provider: str) -> bool:
        return bool((self.get_api_key(provider) or "").strip())

    def available_providers(self) -> list[str]:
        return [p for p, key in self.load()["apiKeys"].items() if key.strip()]


class UsageCheck(NamedTuple):
    success: bool
    remaining: int


class UsageLimitStore(JsonStore):
    """Rolling 24h image counter; bypassed when the user has their own key."""

    def __init__(
        self,
        settings: SettingsStore,
        path: Path = Path(USAGE_STORE_PATH),
        max_per_day: int = MAX_IMAGES_PER_DAY,
        clock: Callable[[], int] = _now_millis,
    ) -> None:
        super().__init__(path)
        self._settings = settings
        self._max = max_per_day
        self._clock = clock

    @property
    def max_per_day(self) -> int:
        return self._max

    def _fresh(self) -> dict:
        return {"processedImages": {"count": 0, "lastResetTime": self._clock()}}

    def load(self) -> dict:
        match self._read():
            case {"processedImages": {"count": int(), "lastResetTime": int() | float() as last}} as limits:
                match self._clock() - last > USAGE_WINDOW_MS:
                    case True:
                        reset = self._fresh()
                        self._write(reset)
                        return reset
                    case False:
                        return limits
            case _:
                return self._fresh()

    def track_image_processed(self, provider: str) -> UsageCheck:
        if self._settings.has_provider_api_key(provider):
            return UsageCheck(success=True, remaining=self._max)

        limits = self.load()
        count = limits["processedImages"]["count"]
        match count >= self._max:
            case True:
                return UsageCheck(success=False, remaining=0)
            case False:
                limits["processedImages"]["count"] = count + 1
                self._write(limits)
                return UsageCheck(success=True, remaining=self._max - count - 1)

    def remaining_image_count(self, provider: str) -> int:
        if self._settings.has_provider_api_key(provider):
            return self._max
        return max(0, self._max - self.load()["processedImages"]["count"])

    def reset_time_remaining(self) -> int:
        """Milliseconds until the counter resets."""
        last = self.load()["processedImages"]["lastResetTime"]
        return max(0, USAGE_WINDOW_MS - (self._clock() - last))

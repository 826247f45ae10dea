import dataclasses
from dataclasses import dataclass
from typing import Any

from shortlinks.constants import Defaults
from shortlinks.exceptions import BadConfigurationError


@dataclass(frozen=True)
class EngineSettings:
    """Tunables of the short link engine.

    Example:
        >>> EngineSettings.from_config({'code_length': 8})
        EngineSettings(code_length=8, max_generation_attempts=10, ...)
    """

    code_length: int = Defaults.CODE_LENGTH
    max_generation_attempts: int = Defaults.MAX_GENERATION_ATTEMPTS
    max_cas_retries: int = Defaults.MAX_CAS_RETRIES
    top_links: int = Defaults.TOP_LINKS
    recent_clicks: int = Defaults.RECENT_CLICKS
    history_window_days: int = Defaults.HISTORY_WINDOW_DAYS

    def __post_init__(self):
        for settings_field in dataclasses.fields(self):
            value = getattr(self, settings_field.name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise BadConfigurationError(f'Engine setting {settings_field.name!r} must be a positive integer (given value: {value!r}).')
        if self.history_window_days > Defaults.MAX_HISTORY_WINDOW_DAYS:
            raise BadConfigurationError(
                f"Engine setting 'history_window_days' must be at most {Defaults.MAX_HISTORY_WINDOW_DAYS} (given value: {self.history_window_days})."
            )

    @classmethod
    def from_config(cls, config: dict[str, Any] | None) -> 'EngineSettings':
        """Build settings from the 'engine' configuration section, ignoring unknown keys."""
        known = {settings_field.name for settings_field in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in (config or {}).items() if k in known})

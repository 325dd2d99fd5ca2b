"""
SupplyBank configuration.

Usage in settings.py:
    SUPPLYBANK = {
        "CACHE_ALIAS": "default",
        "CACHE_TIMEOUT": 300,
        "LOCK_TIMEOUT_SECONDS": 10,
        "EMIT_EVENTS": True,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass
class SupplyBankSettings:
    """SupplyBank configuration settings."""

    # Cache backend holding inventory snapshots
    CACHE_ALIAS: str = "default"

    # Snapshot lifetime in seconds (0 = never cache)
    CACHE_TIMEOUT: int = 300

    # How long a commit waits for a storage location lock
    LOCK_TIMEOUT_SECONDS: float = 10

    # Persist an Event row for every commit and destroy
    EMIT_EVENTS: bool = True

    def __post_init__(self):
        for name in ("CACHE_TIMEOUT", "LOCK_TIMEOUT_SECONDS"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ImproperlyConfigured(
                    f"SUPPLYBANK['{name}'] must be a number of seconds >= 0, got {value!r}"
                )
        if self.CACHE_ALIAS not in settings.CACHES:
            raise ImproperlyConfigured(
                f"SUPPLYBANK['CACHE_ALIAS'] {self.CACHE_ALIAS!r} is not a configured cache"
            )


def get_supplybank_settings() -> SupplyBankSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "SUPPLYBANK", {})
    unknown = sorted(set(user_settings) - set(SupplyBankSettings.__dataclass_fields__))
    if unknown:
        raise ImproperlyConfigured(f"Unknown SUPPLYBANK setting(s): {', '.join(unknown)}")
    return SupplyBankSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_supplybank_settings(), name)


supplybank_settings = _LazySettings()

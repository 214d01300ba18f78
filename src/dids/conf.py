import os

from django.conf import settings

from config.env import env

DEFAULTS = {
    "DIDS_VALIDATE_TIMESTAMPS": True,
}


def dids_setting(name: str):
    """
    Read a DIDS_* setting from Django settings when they are configured or
    DJANGO_SETTINGS_MODULE points at them, otherwise from the process
    environment (via django-environ).
    """
    default = DEFAULTS[name]
    if settings.configured or os.environ.get("DJANGO_SETTINGS_MODULE"):
        return getattr(settings, name, default)
    if isinstance(default, bool):
        return env.bool(name, default=default)
    return env(name, default=default)


def validate_timestamps_enabled() -> bool:
    return bool(dids_setting("DIDS_VALIDATE_TIMESTAMPS"))

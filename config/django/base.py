from config.env import env, read_env_file

read_env_file()

DEBUG = env.bool("DEBUG", default=False)

SECRET_KEY = env.str("DJANGO_SECRET_KEY", default="dids-insecure-local-key")

INSTALLED_APPS = [
    "src.dids.apps.DidsConfig",
]

# The DID apps keep no state of their own.
DATABASES = {}

USE_TZ = True
TIME_ZONE = "UTC"

from config.settings.logging import *  # noqa
from config.settings.dids import *  # noqa

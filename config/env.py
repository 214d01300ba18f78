import environ
from django.core.exceptions import ImproperlyConfigured
import logging

log = logging.getLogger(__name__)

env = environ.Env()

BASE_DIR = environ.Path(__file__) - 2
APPS_DIR = BASE_DIR.path("src")


def env_to_enum(enum_cls, value):
    for x in enum_cls:
        if x.value == value:
            return x

    raise ImproperlyConfigured(
        f"Env value {repr(value)} could not be found in {repr(enum_cls)}"
    )


def read_env_file(path=None) -> None:
    """
    Load a .env file into os.environ if it exists (existing variables win).
    """
    target = path or BASE_DIR(".env")
    try:
        environ.Env.read_env(str(target))
    except OSError as e:
        log.warning("read_env_file: could not read %s: %s", target, e)

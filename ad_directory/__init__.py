"""Active Directory user, group and membership management over ldap3."""

from .ad import *  # noqa: F401,F403
from .ad import __all__ as _ad_all
from .env_settings import DirectoryConfig, get_config
from .log_config import setup_logging

__version__ = "0.1.0"

__all__ = [*_ad_all, "DirectoryConfig", "get_config", "setup_logging"]

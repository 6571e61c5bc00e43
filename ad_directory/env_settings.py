from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from .ad_utils import domain_to_base_dn


class DirectoryConfig(BaseSettings):
    """Connection settings for one directory server.

    Pass an instance to ``DirectoryConnection``; ``get_config()`` builds one
    from the ``AD_*`` environment variables.
    """

    host: str = Field("localhost", alias="AD_HOST")
    port: int = Field(389, alias="AD_PORT", ge=1, le=65535)
    bind_user: str = Field("", alias="AD_USER")
    bind_password: str = Field("", alias="AD_PASS", repr=False)
    base_dn: str = Field("", alias="AD_BASEDN")
    domain: str = Field("", alias="AD_DOMAIN")
    use_ssl: bool = Field(False, alias="AD_USE_SSL")

    connect_timeout: float = Field(10.0, alias="AD_CONNECT_TIMEOUT", gt=0)
    receive_timeout: float = Field(30.0, alias="AD_RECEIVE_TIMEOUT", gt=0)

    log_level: str = Field("INFO", alias="AD_LOG_LEVEL")

    class Config:
        populate_by_name = True

    @field_validator("host", "bind_user", "base_dn", "domain")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()

    @model_validator(mode="after")
    def _default_base_dn(self) -> "DirectoryConfig":
        # DC=example,DC=com from example.com when no explicit base DN is set
        if not self.base_dn and self.domain:
            self.base_dn = domain_to_base_dn(self.domain)
        return self


@lru_cache(maxsize=1)
def get_config() -> DirectoryConfig:
    return DirectoryConfig()

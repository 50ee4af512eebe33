"""
Common Configuration

Settings shared by every service in the repository. Service configs such as
GraphQlHttpConfig extend BaseAppConfig with their own fields.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class BaseAppConfig(BaseSettings):
    """
    Common application settings.

    LOG_LEVEL feeds the ${LOG_LEVEL} placeholder of the logging YAML and
    VERIFY_SSL is applied to the upstream httpx client.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    VERIFY_SSL: bool = Field(default=False, description="Whether to verify SSL certificates")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

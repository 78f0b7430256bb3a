from typing import Dict, Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator

from ._utils.constants import (
    API_URLS,
    DEFAULT_CAPABILITIES,
    DEFAULT_CONNECTION_TYPE,
    DEFAULT_SIG_KEY_VERSION,
    DEFAULT_USER_AGENT,
)


class Config(BaseModel):
    api_urls: Dict[int, str] = Field(default_factory=lambda: dict(API_URLS))
    capabilities: str = DEFAULT_CAPABILITIES
    connection_type: str = DEFAULT_CONNECTION_TYPE
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    debug: bool = False
    sig_key: Optional[str] = None
    sig_key_version: str = DEFAULT_SIG_KEY_VERSION

    @field_validator("api_urls")
    @classmethod
    def validate_api_urls(cls, value: Dict[int, str]) -> Dict[int, str]:
        assert value, "At least one API version must be configured"
        for version, url in value.items():
            # relative endpoints are appended verbatim, so the base must end with "/"
            url_value = HttpUrl(url=url)
            assert url_value.scheme in ("http", "https"), (
                f"Invalid URL for API version {version}"
            )
            assert url.endswith("/"), f"URL for API version {version} must end with '/'"
        return value

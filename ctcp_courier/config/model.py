from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    CTCP_CLIENT_NAME,
    CTCP_CLIENT_VERSION,
    CTCP_REPLY_QUEUE_SIZE,
    CTCP_REPLY_RATE,
    CTCP_SOURCE_URL,
    _get_env_float,
    _get_env_int,
    _get_env_str,
)


class CtcpSettings(BaseModel):
    """Construction-time settings for a CTCP listener and its reply schedulers.

    Attributes:
        reply_queue_size: Maximum number of pending replies per connection;
            replies offered while the queue is full are dropped.
        reply_rate: Minimum number of seconds between two consecutive replies
            sent on the same connection.
        client_name: Client name reported in VERSION replies.
        client_version: Client version reported in VERSION replies.
        source_url: URL reported in VERSION and SOURCE replies.
    """

    model_config = ConfigDict(frozen=True)

    reply_queue_size: int = Field(default=CTCP_REPLY_QUEUE_SIZE, gt=0)
    reply_rate: float = Field(default=CTCP_REPLY_RATE, gt=0)
    client_name: str = Field(default=CTCP_CLIENT_NAME, min_length=1)
    client_version: str = CTCP_CLIENT_VERSION
    source_url: str = CTCP_SOURCE_URL

    @field_validator("client_name", "client_version", "source_url", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Strip surrounding whitespace from text fields."""
        if isinstance(v, str):
            return v.strip()
        return v

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CtcpSettings:
        """Create settings from a dictionary, ignoring unknown keys.

        Args:
            data: Dictionary containing settings values.

        Returns:
            CtcpSettings instance.
        """
        known = {k: v for k, v in data.items() if k in cls.model_fields}
        return cls.model_validate(known)

    @classmethod
    def from_env(cls) -> CtcpSettings:
        """Create settings from the current process environment.

        Reads CTCP_REPLY_QUEUE_SIZE, CTCP_REPLY_RATE, CTCP_CLIENT_NAME,
        CTCP_CLIENT_VERSION and CTCP_SOURCE_URL, falling back to the module
        defaults for anything unset or unparsable.
        """
        return cls(
            reply_queue_size=_get_env_int("CTCP_REPLY_QUEUE_SIZE", CTCP_REPLY_QUEUE_SIZE),
            reply_rate=_get_env_float("CTCP_REPLY_RATE", CTCP_REPLY_RATE),
            client_name=_get_env_str("CTCP_CLIENT_NAME", CTCP_CLIENT_NAME),
            client_version=_get_env_str("CTCP_CLIENT_VERSION", CTCP_CLIENT_VERSION),
            source_url=_get_env_str("CTCP_SOURCE_URL", CTCP_SOURCE_URL),
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

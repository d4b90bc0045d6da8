"""Configuration loaded from the environment (.env supported)."""

import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

_TRUTHY = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


def _env_optional(name: str) -> Optional[str]:
    raw = os.getenv(name, "").strip()
    return raw or None


@dataclass
class DiscordConfig:
    token: str = ""
    # Only listen in this channel; also the timer's destination
    channel_id: Optional[str] = None
    # Only respond in this channel
    response_channel_id: Optional[str] = None


@dataclass
class ResponseConfig:
    respond_to_dms: bool = False
    respond_to_mentions: bool = False
    respond_to_bots: bool = False
    respond_to_generic: bool = False


@dataclass
class TimerConfig:
    enabled: bool = False
    interval_minutes: int = 15
    firing_probability: float = 0.1


@dataclass
class BatchConfig:
    enabled: bool = False
    max_size: int = 10
    timeout_ms: int = 30000


@dataclass
class AgentConfig:
    base_url: str = "https://api.letta.com"
    api_key: str = ""
    agent_id: str = ""
    timeout_seconds: float = 120.0


@dataclass
class AppConfig:
    """Typed process configuration. Static for the process lifetime."""

    port: int = 3001
    discord: DiscordConfig = field(default_factory=DiscordConfig)
    responses: ResponseConfig = field(default_factory=ResponseConfig)
    timer: TimerConfig = field(default_factory=TimerConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            port=_env_int("PORT", 3001),
            discord=DiscordConfig(
                token=os.getenv("DISCORD_TOKEN", ""),
                channel_id=_env_optional("DISCORD_CHANNEL_ID"),
                response_channel_id=_env_optional("DISCORD_RESPONSE_CHANNEL_ID"),
            ),
            responses=ResponseConfig(
                respond_to_dms=_env_bool("RESPOND_TO_DMS"),
                respond_to_mentions=_env_bool("RESPOND_TO_MENTIONS"),
                respond_to_bots=_env_bool("RESPOND_TO_BOTS"),
                respond_to_generic=_env_bool("RESPOND_TO_GENERIC"),
            ),
            timer=TimerConfig(
                enabled=_env_bool("ENABLE_TIMER"),
                interval_minutes=_env_int("TIMER_INTERVAL_MINUTES", 15),
                firing_probability=_env_float("FIRING_PROBABILITY", 0.1),
            ),
            batch=BatchConfig(
                enabled=_env_bool("MESSAGE_BATCH_ENABLED"),
                max_size=_env_int("MESSAGE_BATCH_SIZE", 10),
                timeout_ms=_env_int("MESSAGE_BATCH_TIMEOUT_MS", 30000),
            ),
            agent=AgentConfig(
                base_url=os.getenv("LETTA_BASE_URL", "https://api.letta.com").rstrip("/"),
                api_key=os.getenv("LETTA_API_KEY", ""),
                agent_id=os.getenv("LETTA_AGENT_ID", ""),
                timeout_seconds=_env_float("LETTA_TIMEOUT_SECONDS", 120.0),
            ),
        )

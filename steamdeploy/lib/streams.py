from datetime import datetime
import sys
import redis
from typing import Optional
from .config import SteamConfig


class LogStream():
    """A logging stream that writes log entries to a Redis stream."""

    def __init__(self, stream_name: str, client: Optional[redis.Redis] = None, echo: bool = True) -> None:
        self.stream_name: str = stream_name
        self.redis_client: Optional[redis.Redis] = client
        self.echo: bool = echo
        self._stream_failed: bool = False

    @classmethod
    def from_config(cls, stream_name: str, config: SteamConfig, echo: bool = True) -> "LogStream":
        """Create a stream connected to the Valkey instance described by config."""
        # Connect to Valkey
        client = redis.Redis(
            host=config.valkey_host,
            port=config.valkey_port,
            password=config.valkey_password,
            ssl=config.valkey_use_ssl,
            decode_responses=True,
        )
        return cls(stream_name, client=client, echo=echo)

    # Log a line to the stream
    def log(self, line: str, level: str = "info") -> None:
        """Log a line to the Redis stream and echo it to the console."""
        if self.echo:
            out = sys.stderr if level.lower().startswith("e") else sys.stdout
            print(line, file=out)

        if self.redis_client is None or self._stream_failed:
            return

        try:
            self.redis_client.xadd(
                self.stream_name,
                {
                    "line": line,
                    "timestamp": datetime.now().isoformat(),
                    "level": level[0].lower()
                },
            )
        except redis.RedisError as e:
            # Stop writing to the stream after the first failure, the console still gets every line
            self._stream_failed = True
            print(f"Log stream {self.stream_name} unavailable: {str(e)}", file=sys.stderr)

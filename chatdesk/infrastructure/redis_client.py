"""Redis client factory following Dependency Inversion Principle."""
import logging
import time
from typing import Optional
import redis
from redis.connection import ConnectionPool

from chatdesk.config.settings import Config


class RedisClientFactory:
    """Factory for the shared Redis client backing snapshot persistence."""

    _pool: Optional[ConnectionPool] = None
    _client: Optional[redis.Redis] = None

    @classmethod
    def create_pool(cls, url: str, max_connections: int = 10) -> ConnectionPool:
        """
        Create Redis connection pool.

        Args:
            url: Redis connection URL
            max_connections: Maximum number of connections in pool

        Returns:
            ConnectionPool instance
        """
        if cls._pool is None:
            logging.debug(f"Creating Redis connection pool: {cls.mask_url(url)}")
            cls._pool = ConnectionPool.from_url(
                url,
                max_connections=max_connections,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
        return cls._pool

    @staticmethod
    def mask_url(url: str) -> str:
        """Mask the password of a Redis URL for logging."""
        if '@' in url:
            auth_part, host_part = url.split('@', 1)
            if ':' in auth_part.split('://', 1)[-1]:
                scheme_user = auth_part.rsplit(':', 1)[0]
                return f"{scheme_user}:***@{host_part}"
        return url

    @classmethod
    def get_client(cls, url: Optional[str] = None, ping_attempts: int = 3) -> Optional[redis.Redis]:
        """
        Get Redis client instance (singleton pattern).

        Args:
            url: Optional Redis URL (uses Config if not provided)
            ping_attempts: Connection checks before giving up

        Returns:
            Redis client instance or None if connection fails
        """
        if cls._client is not None:
            return cls._client

        redis_url = url or Config.REDIS_URL
        if not redis_url:
            logging.warning("REDIS_URL not configured")
            return None

        if not redis_url.startswith(('redis://', 'rediss://', 'unix://')):
            logging.warning("Invalid Redis URL scheme. URL must start with redis://, rediss:// or unix://")
            return None

        try:
            client = redis.Redis(connection_pool=cls.create_pool(redis_url))
            for attempt in range(ping_attempts):
                try:
                    client.ping()
                    break
                except redis.ConnectionError:
                    if attempt == ping_attempts - 1:
                        raise
                    logging.debug(f"Redis ping failed (attempt {attempt + 1}/{ping_attempts}), retrying...")
                    time.sleep(1)
            logging.info(f"Redis connection established: {cls.mask_url(redis_url)}")
            cls._client = client
        except redis.AuthenticationError as e:
            logging.error(f"Redis authentication failed: {e}")
            cls.close()
        except redis.RedisError as e:
            logging.warning(f"Failed to connect to Redis: {e}")
            logging.warning("Snapshot reads and writes will retry the connection until Redis is reachable")
            cls.close()

        return cls._client

    @classmethod
    def close(cls) -> None:
        """Close Redis connections."""
        if cls._client:
            cls._client.close()
            cls._client = None
        if cls._pool:
            cls._pool.disconnect()
            cls._pool = None

# urban_harvest/services/rate_limiter.py
import redis
from redis.exceptions import RedisError

from urban_harvest.utils.retry import redis_retry
from urban_harvest.utils.settings import REDIS_URL, LOGIN_MAX_ATTEMPTS, LOGIN_WINDOW_SECONDS
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

# INCR + EXPIRE on the first hit, atomic inside redis
_HIT_LUA = """
local n = redis.call('INCR', KEYS[1])
if n == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return n
"""


class LoginRateLimiter:
    """
    Failed login counter per client, kept in redis with a fixed window.

    -is_blocked: the client already used up its attempts
    -register_failure: counts one failed attempt
    -reset: a successful login clears the counter

    When redis is unreachable the limiter lets requests through.
    """

    def __init__(self, url: str | None = None, max_attempts: int = LOGIN_MAX_ATTEMPTS,
                 window_seconds: int = LOGIN_WINDOW_SECONDS):
        self.redis = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds

    @staticmethod
    def _key(client_id: str) -> str:
        return f"login:failures:{client_id}"

    @redis_retry()
    def _count(self, client_id: str) -> int:
        return int(self.redis.get(self._key(client_id)) or 0)

    @redis_retry()
    def _hit(self, client_id: str) -> int:
        return int(self.redis.eval(_HIT_LUA, 1, self._key(client_id), self.window_seconds))

    @redis_retry()
    def _clear(self, client_id: str):
        self.redis.delete(self._key(client_id))

    def is_blocked(self, client_id: str) -> bool:
        try:
            return self._count(client_id) >= self.max_attempts
        except RedisError as e:
            logger.warning(f"Login limiter unavailable, allowing {client_id}: {e}")
            return False

    def register_failure(self, client_id: str):
        try:
            n = self._hit(client_id)
            logger.info(f"Failed login {n}/{self.max_attempts} for {client_id}")
        except RedisError as e:
            logger.warning(f"Could not record failed login for {client_id}: {e}")

    def reset(self, client_id: str):
        try:
            self._clear(client_id)
        except RedisError as e:
            logger.warning(f"Could not reset login counter for {client_id}: {e}")


_limiter: LoginRateLimiter | None = None


def get_login_limiter() -> LoginRateLimiter:
    global _limiter
    if _limiter is None:
        _limiter = LoginRateLimiter()
    return _limiter

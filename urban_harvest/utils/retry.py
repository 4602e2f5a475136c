# urban_harvest/utils/retry.py
import logging

from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log
import requests
import redis

from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)


def _bounded_retry(exc_types, base: float, cap: float, attempts: int = 3):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base, min=base, max=cap),
        retry=retry_if_exception_type(exc_types),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def push_retry():
    # web push endpoints over HTTP; only transport errors are repeated,
    # a push service answering 4xx/5xx surfaces as WebPushException
    return _bounded_retry((requests.ConnectionError, requests.Timeout), base=0.3, cap=3)


def redis_retry():
    return _bounded_retry(redis.RedisError, base=0.2, cap=2)

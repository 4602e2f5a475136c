# urban_harvest/services/push_service.py
import json

import requests
from pywebpush import webpush, WebPushException
from sqlalchemy.orm import Session

from urban_harvest.data.models.push_subscription import PushSubscriptionModel
from urban_harvest.repos.push_repo import PushRepo
from urban_harvest.utils.retry import push_retry
from urban_harvest.utils.settings import VAPID_PRIVATE_KEY, VAPID_CLAIMS_EMAIL
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

# push services answer these for subscriptions that no longer exist
_GONE = (404, 410)


@push_retry()
def _deliver(subscription_info: dict, data: str):
    webpush(
        subscription_info=subscription_info,
        data=data,
        vapid_private_key=VAPID_PRIVATE_KEY,
        vapid_claims={"sub": VAPID_CLAIMS_EMAIL},
    )


class PushService:
    """
    Web Push fan-out over the stored browser subscriptions.

    A failed subscription never aborts the fan-out: it is logged and
    counted, and removed when the push service reports it gone.
    """

    def __init__(self, db: Session):
        self.repo = PushRepo(db)

    def subscribe(self, user_id: int, endpoint: str, keys: dict) -> PushSubscriptionModel:
        sub = self.repo.upsert(user_id, endpoint, keys)
        logger.info(f"Push subscription {sub.id} stored for user {user_id}")
        return sub

    def send_to_user(self, user_id: int, title: str | None, body: str | None, url: str | None) -> dict:
        subs = self.repo.list_for_user(user_id)
        if not subs:
            raise LookupError("User has no subscriptions")
        payload = {
            "title": title or "Urban Harvest Update",
            "body": body or "You have a new update!",
            "url": url or "/",
        }
        return self._fan_out(subs, payload)

    def send_to_all(self, title: str, body: str, url: str | None = None) -> dict:
        subs = self.repo.list_all()
        if not subs:
            raise LookupError("No users with subscriptions found")
        result = self._fan_out(subs, {"title": title, "body": body, "url": url or "/"})
        result["total_users"] = len({s.user_id for s in subs})
        return result

    def _fan_out(self, subs: list[PushSubscriptionModel], payload: dict) -> dict:
        data = json.dumps(payload)
        success = failed = 0
        for sub in subs:
            try:
                _deliver(sub.subscription_info(), data)
                success += 1
            except WebPushException as e:
                failed += 1
                status = e.response.status_code if e.response is not None else None
                logger.warning(f"Push to subscription {sub.id} failed ({status}): {e}")
                if status in _GONE:
                    self.repo.delete(sub)
                    logger.info(f"Removed expired push subscription {sub.id}")
            except requests.RequestException as e:
                failed += 1
                logger.warning(f"Push to subscription {sub.id} failed after retries: {e}")
        logger.info(f"Push fan-out done: {success} sent, {failed} failed")
        return {"success": success, "failed": failed}

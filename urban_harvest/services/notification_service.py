# urban_harvest/services/notification_service.py
from urban_harvest.celery_worker import celery_app
from urban_harvest.data.database import SessionLocal
from urban_harvest.services.push_service import PushService
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Queues push notifications on Celery.
    Queueing is best effort: a broker outage never fails the caller.
    """

    @staticmethod
    def broadcast(title: str, body: str, url: str = "/"):
        try:
            broadcast_task.delay(title, body, url)
        except Exception as e:
            logger.warning(f"Could not queue broadcast '{title}': {e}")

    @staticmethod
    def notify_user(user_id: int, title: str, body: str, url: str = "/"):
        try:
            notify_user_task.delay(user_id, title, body, url)
        except Exception as e:
            logger.warning(f"Could not queue notification for user {user_id}: {e}")


@celery_app.task(name="urban_harvest.services.notification_service.broadcast_task")
def broadcast_task(title: str, body: str, url: str = "/"):
    db = SessionLocal()
    try:
        return PushService(db).send_to_all(title, body, url)
    except LookupError:
        logger.info(f"Broadcast '{title}' skipped, nobody is subscribed")
        return {"success": 0, "failed": 0}
    finally:
        db.close()


@celery_app.task(name="urban_harvest.services.notification_service.notify_user_task")
def notify_user_task(user_id: int, title: str, body: str, url: str = "/"):
    db = SessionLocal()
    try:
        return PushService(db).send_to_user(user_id, title, body, url)
    except LookupError:
        logger.info(f"User {user_id} has no push subscriptions")
        return {"success": 0, "failed": 0}
    finally:
        db.close()

# urban_harvest/tasks/deliveries.py
from urban_harvest.celery_worker import celery_app
from urban_harvest.data.database import SessionLocal
from urban_harvest.services.notification_service import NotificationService
from urban_harvest.services.subscription_service import SubscriptionService
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="urban_harvest.tasks.deliveries.roll_deliveries_task")
def roll_deliveries_task():
    logger.info("Roll deliveries task started")

    db = SessionLocal()
    try:
        rolled = SubscriptionService(db).roll_deliveries()
        logger.info(f"Rolled {len(rolled)} subscriptions to their next delivery")

        for sub, box in rolled:
            NotificationService.notify_user(
                sub.user_id,
                "Your box is on its way!",
                f"{box.name} is out for delivery. Next one: {sub.next_delivery_date.isoformat()}",
                "/subscriptions",
            )
        return len(rolled)
    finally:
        db.close()

import logging

from celery import shared_task
from django.utils import timezone

from .services import SlotServices

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def expire_doctor_slots(self):
    """Celery task sweeping ended AVAILABLE slots to EXPIRED"""
    try:
        expired = SlotServices.expire_slots(timezone.now())
        return {"expired": expired}
    except Exception as exc:
        logger.error(f"Slot expiry sweep failed: {str(exc)}")
        # Retry with exponential backoff
        raise self.retry(exc=exc, countdown=60 * (2**self.request.retries))

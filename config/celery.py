from celery import Celery
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("medsi")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Celery Beat Schedule
app.conf.beat_schedule = {
    "expire-doctor-slots": {
        "task": "apps.slot.tasks.expire_doctor_slots",
        # Mirrors settings.SLOT_EXPIRY_SWEEP_SECONDS; read before settings load
        "schedule": float(os.getenv("SLOT_EXPIRY_SWEEP_SECONDS", "300")),
    },
}

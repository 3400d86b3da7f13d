from django.apps import AppConfig


class AppointmentConfig(AppConfig):
    name = "apps.appointment"
    label = "appointment"

    def ready(self):
        from . import signals  # noqa: F401

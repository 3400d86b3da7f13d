from django.apps import AppConfig


class SlotConfig(AppConfig):
    name = "apps.slot"
    label = "slot"

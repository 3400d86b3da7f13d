from django.apps import AppConfig


class PrescriptionConfig(AppConfig):
    name = "apps.prescription"
    label = "prescription"

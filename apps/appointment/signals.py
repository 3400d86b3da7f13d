from django.db.models.signals import pre_delete
from django.dispatch import receiver

from apps.slot.services import SlotServices

from .models import Appointment


@receiver(pre_delete, sender=Appointment)
def release_slot_on_delete(sender, instance, **kwargs):
    """
    Covers every delete path, including cascades from Patient, Doctor and User,
    so a slot never stays BOOKED without its appointment.
    """
    SlotServices.release_slot(instance.id)

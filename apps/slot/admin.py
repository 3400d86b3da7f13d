from django.contrib import admin

from .models import DoctorSlot


@admin.register(DoctorSlot)
class DoctorSlotAdmin(admin.ModelAdmin):
    list_display = ["doctor", "start_time", "end_time", "duration", "status"]
    list_filter = ["status"]
    search_fields = ["doctor__user__full_name"]
    # Status and booking move only through booking, cancellation and expiry
    readonly_fields = ["status", "appointment", "created_at", "updated_at"]

from django.contrib import admin

from .models import Prescription


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ["doctor", "patient", "appointment", "diagnosis", "created_at"]
    search_fields = ["doctor__user__full_name", "patient__user__full_name", "diagnosis"]
    readonly_fields = ["created_at", "updated_at"]

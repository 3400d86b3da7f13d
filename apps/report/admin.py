from django.contrib import admin

from .models import Report


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ["doctor", "patient", "file_type", "uploaded_at"]
    list_filter = ["file_type"]
    search_fields = ["doctor__user__full_name", "patient__user__full_name"]
    readonly_fields = ["uploaded_at", "created_at", "updated_at"]

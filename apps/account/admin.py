from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Doctor, DoctorPatient, Patient, User


class UserAdmin(BaseUserAdmin):
    list_display = ("id", "full_name", "email", "user_type", "is_active")
    list_filter = ("user_type", "is_active", "is_staff")
    search_fields = ("full_name", "email", "mobile_number")
    ordering = ("-created_at",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal info", {"fields": ("full_name", "username", "mobile_number")}),
        ("Role", {"fields": ("user_type",)}),
        (
            "Permissions",
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "username",
                    "full_name",
                    "user_type",
                    "password1",
                    "password2",
                ),
            },
        ),
    )


class DoctorAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "specialization", "license_number", "experience_years")
    search_fields = ("user__full_name", "user__email", "license_number")
    ordering = ("user__full_name",)


class PatientAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "date_of_birth", "gender", "blood_group")
    list_filter = ("blood_group", "gender")
    search_fields = ("user__full_name", "user__email")
    ordering = ("user__full_name",)


class DoctorPatientAdmin(admin.ModelAdmin):
    list_display = ("doctor", "patient", "created_at")
    search_fields = ("doctor__user__full_name", "patient__user__full_name")


admin.site.register(User, UserAdmin)
admin.site.register(Doctor, DoctorAdmin)
admin.site.register(Patient, PatientAdmin)
admin.site.register(DoctorPatient, DoctorPatientAdmin)

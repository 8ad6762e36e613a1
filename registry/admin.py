from django.contrib import admin, messages
from django.utils.html import format_html

from .approval_service import ApprovalService, RegistrationStateError
from .models import Profile, UserRole, LandRegistration, Land, AuditLog

STATUS_COLORS = {
    "pending": "orange",
    "approved": "green",
    "rejected": "red",
    "active": "green",
}


def status_badge(status, label):
    return format_html(
        '<span style="color: {}; font-weight: bold;">{}</span>',
        STATUS_COLORS.get(status, "gray"),
        label.upper()
    )


# ----------------------------------------
# Users
# ----------------------------------------
@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("full_name", "user", "role_display", "created_at")
    search_fields = ("full_name", "user__username", "user__email")
    readonly_fields = ("created_at",)

    def role_display(self, obj):
        return obj.role or "-"
    role_display.short_description = "Role"


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "assigned_at", "updated_at")
    list_filter = ("role",)
    search_fields = ("user__username", "user__email")
    readonly_fields = ("assigned_at", "updated_at")


# ----------------------------------------
# Registrations & Lands
# ----------------------------------------
class LandInline(admin.StackedInline):
    model = Land
    extra = 0
    can_delete = False
    readonly_fields = ("owner", "title_deed_number", "district", "status", "created_at")
    fields = readonly_fields
    show_change_link = True


@admin.register(LandRegistration)
class LandRegistrationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "title_deed_number",
        "applicant",
        "district",
        "land_use",
        "land_size",
        "status_display",
        "submitted_at",
        "has_document",
    )
    list_filter = ("status", "district", "land_use")
    search_fields = ("title_deed_number", "location_name", "applicant__username")
    # Review fields change only through the approve/reject actions
    readonly_fields = ("status", "admin_notes", "reviewed_by", "reviewed_at", "submitted_at")
    fieldsets = (
        ("Property", {
            "fields": (
                "applicant", "title_deed_number", "land_size", "land_use",
                "district", "location_name", "latitude", "longitude", "boundaries",
            )
        }),
        ("Documents", {
            "fields": ("document",),
        }),
        ("Review", {
            "fields": ("status", "admin_notes", "reviewed_by", "reviewed_at", "submitted_at"),
        }),
    )
    inlines = [LandInline]
    actions = ["approve_selected", "reject_selected"]

    def status_display(self, obj):
        return status_badge(obj.status, obj.get_status_display())
    status_display.short_description = "Status"
    status_display.admin_order_field = "status"

    def has_document(self, obj):
        if obj.document:
            return "✓"
        return "✗"
    has_document.short_description = "Document"

    def _review_selected(self, request, queryset, review, verb):
        done = skipped = 0
        for registration in queryset:
            try:
                review(registration.pk, request.user)
                done += 1
            except RegistrationStateError:
                skipped += 1

        self.message_user(request, f"{done} registration(s) {verb}.")
        if skipped:
            self.message_user(
                request,
                f"{skipped} registration(s) skipped because they were already reviewed.",
                level=messages.WARNING,
            )

    def approve_selected(self, request, queryset):
        self._review_selected(request, queryset, ApprovalService.approve, "approved")
    approve_selected.short_description = "Approve selected registrations"

    def reject_selected(self, request, queryset):
        self._review_selected(request, queryset, ApprovalService.reject, "rejected")
    reject_selected.short_description = "Reject selected registrations"


@admin.register(Land)
class LandAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "title_deed_number",
        "owner",
        "district",
        "land_use",
        "land_size",
        "coordinates",
        "status_display",
        "created_at",
    )
    list_filter = ("district", "land_use", "status")
    search_fields = ("title_deed_number", "location_name", "owner__username")
    readonly_fields = ("registration", "created_at", "updated_at")

    def coordinates(self, obj):
        return f"{obj.latitude}, {obj.longitude}"
    coordinates.short_description = "Coordinates"

    def status_display(self, obj):
        return status_badge(obj.status, obj.get_status_display())
    status_display.short_description = "Status"


# ----------------------------------------
# Audit
# ----------------------------------------
@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "user", "object_type", "object_id", "ip_address")
    list_filter = ("action", "object_type")
    search_fields = ("user__username", "object_type")
    readonly_fields = (
        "user", "action", "object_type", "object_id",
        "extra", "ip_address", "user_agent", "created_at",
    )

    def has_add_permission(self, request):
        return False

from decimal import Decimal

from django.db import models
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator

from .malawi_data import DISTRICT_CHOICES, LAND_USE_CHOICES

# -----------------------------
# User & Role Models
# -----------------------------

ROLE_USER = 'user'
ROLE_LANDOWNER = 'landowner'
ROLE_ADMIN = 'admin'

ROLE_CHOICES = [
    (ROLE_USER, 'General User'),
    (ROLE_LANDOWNER, 'Land Owner'),
    (ROLE_ADMIN, 'Administrator'),
]


class Profile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    full_name = models.CharField(max_length=200, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['full_name']

    def __str__(self):
        return self.full_name or self.user.username

    @property
    def role(self):
        """Current role, or None when the identity has no assignment."""
        assignment = getattr(self.user, 'role_assignment', None)
        return assignment.role if assignment else None


class UserRole(models.Model):
    """At most one active role per user; editing replaces the assignment."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='role_assignment')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER)
    assigned_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.username}: {self.get_role_display()}"


# -----------------------------
# Property details shared by registrations and lands
# -----------------------------
class PropertyDetails(models.Model):
    title_deed_number = models.CharField(max_length=100)
    land_size = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="In hectares"
    )
    land_use = models.CharField(max_length=30, choices=LAND_USE_CHOICES)
    location_name = models.CharField(max_length=200)
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
        help_text="Latitude (e.g. -13.962634 for Lilongwe)"
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
        help_text="Longitude (e.g. 33.774119 for Lilongwe)"
    )
    district = models.CharField(max_length=50, choices=DISTRICT_CHOICES)
    boundaries = models.TextField(blank=True, default="")

    # Fields carried from a registration onto the approved land
    PROPERTY_FIELDS = (
        'title_deed_number',
        'land_size',
        'land_use',
        'location_name',
        'latitude',
        'longitude',
        'district',
        'boundaries',
    )

    class Meta:
        abstract = True

    def property_values(self):
        return {field: getattr(self, field) for field in self.PROPERTY_FIELDS}


# -----------------------------
# Pending applications
# -----------------------------
class LandRegistration(PropertyDetails):
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending Review'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    # Only these may change after the row is created
    REVIEW_FIELDS = ('status', 'reviewed_at', 'reviewed_by', 'admin_notes')

    applicant = models.ForeignKey(User, on_delete=models.CASCADE, related_name='land_registrations')
    document = models.FileField(
        upload_to="registration_documents/",
        max_length=255,
        null=True,
        blank=True,
        help_text="Title deed or survey plan (optional)"
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    submitted_at = models.DateTimeField(auto_now_add=True)

    # Review
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_registrations'
    )
    admin_notes = models.TextField(blank=True, default="")

    class Meta:
        ordering = ['-submitted_at']
        indexes = [
            models.Index(fields=['status', 'submitted_at'], name='registration_status_idx'),
            models.Index(fields=['applicant', 'status'], name='registration_applicant_idx'),
            models.Index(fields=['district'], name='registration_district_idx'),
        ]

    def __str__(self):
        return f"{self.title_deed_number} - {self.location_name} ({self.status})"

    def clean(self):
        if self._state.adding or not self.pk:
            return
        original = LandRegistration.objects.filter(pk=self.pk).values(
            *self.PROPERTY_FIELDS, 'applicant_id', 'document', 'status'
        ).first()
        if original is None:
            return
        # Approved and rejected are terminal
        original_status = original.pop('status')
        if original_status != self.STATUS_PENDING and self.status != original_status:
            raise ValidationError(
                f"Registration is already {original_status} and cannot move to {self.status}"
            )
        current = self.property_values()
        current['applicant_id'] = self.applicant_id
        current['document'] = self.document.name or None
        changed = [
            field for field, value in original.items()
            if (value or None) != (current[field] or None)
        ]
        if changed:
            raise ValidationError(
                f"Registration details are immutable once submitted (changed: {', '.join(changed)})"
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    def mark_reviewed(self, status, reviewer, notes, reviewed_at):
        """Move a pending registration to a terminal review status."""
        self.status = status
        self.reviewed_by = reviewer
        self.admin_notes = notes
        self.reviewed_at = reviewed_at
        self.save(update_fields=list(self.REVIEW_FIELDS))


# -----------------------------
# Approved properties
# -----------------------------
class Land(PropertyDetails):
    STATUS_ACTIVE = 'active'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
    ]

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name='lands')
    registration = models.OneToOneField(
        LandRegistration,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='land',
        help_text="The approved registration this record was created from"
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['district'], name='land_district_idx'),
            models.Index(fields=['land_use'], name='land_land_use_idx'),
            models.Index(fields=['latitude', 'longitude'], name='land_coordinates_idx'),
        ]

    def __str__(self):
        return f"{self.title_deed_number} - {self.location_name}"

    @property
    def owner_name(self):
        profile = getattr(self.owner, 'profile', None)
        return profile.full_name if profile and profile.full_name else self.owner.username


# -----------------------------
# Audit trail
# -----------------------------
class AuditLog(models.Model):
    """Log sensitive actions for compliance and security (who did what when)."""
    ACTION_CHOICES = [
        ('sign_up', 'Sign Up'),
        ('sign_in', 'Sign In'),
        ('failed_sign_in', 'Failed Sign In'),
        ('sign_out', 'Sign Out'),
        ('submit_registration', 'Submit Registration'),
        ('approve_registration', 'Approve Registration'),
        ('reject_registration', 'Reject Registration'),
        ('change_role', 'Change Role'),
    ]
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs'
    )
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    object_type = models.CharField(max_length=50, blank=True)  # e.g. 'LandRegistration', 'UserRole'
    object_id = models.PositiveIntegerField(null=True, blank=True)
    extra = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='auditlog_created_idx'),
            models.Index(fields=['user', 'action'], name='auditlog_user_action_idx'),
        ]

    def __str__(self):
        return f"{self.get_action_display()} by {self.user_id} at {self.created_at}"

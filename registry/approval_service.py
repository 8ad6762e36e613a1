# registry/approval_service.py

import logging

from django.db import transaction
from django.utils import timezone

from .models import LandRegistration, Land

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_NOTES = "Approved"
DEFAULT_REJECTION_NOTES = "Rejected"


class RegistrationStateError(Exception):
    """The registration has already left the pending state."""

    def __init__(self, registration):
        self.registration = registration
        super().__init__(
            f"Registration {registration.pk} is already {registration.status}"
        )


class ApprovalService:
    """Service layer for the pending → approved / rejected review workflow"""

    @staticmethod
    def _lock_pending(registration_id):
        registration = LandRegistration.objects.select_for_update().get(pk=registration_id)
        if not registration.is_pending:
            logger.warning(f"Refused to review registration {registration_id}: status is {registration.status}")
            raise RegistrationStateError(registration)
        return registration

    @staticmethod
    @transaction.atomic
    def approve(registration_id, reviewer, notes=""):
        """
        Copy a pending registration into the lands table and mark it approved.

        Both writes happen in one transaction with the registration row
        locked, so a failure leaves neither behind and a second approval of
        the same registration is refused.
        """
        registration = ApprovalService._lock_pending(registration_id)

        land, created = Land.objects.get_or_create(
            registration=registration,
            defaults={
                'owner_id': registration.applicant_id,
                'status': Land.STATUS_ACTIVE,
                **registration.property_values(),
            }
        )
        if not created:
            logger.warning(f"Land {land.id} already existed for registration {registration.id}")

        registration.mark_reviewed(
            LandRegistration.STATUS_APPROVED,
            reviewer,
            notes or DEFAULT_APPROVAL_NOTES,
            timezone.now(),
        )

        logger.info(f"Registration {registration.id} approved by {reviewer.username}; land {land.id} created")
        return land

    @staticmethod
    @transaction.atomic
    def reject(registration_id, reviewer, notes=""):
        """Mark a pending registration rejected. No land is created."""
        registration = ApprovalService._lock_pending(registration_id)

        registration.mark_reviewed(
            LandRegistration.STATUS_REJECTED,
            reviewer,
            notes or DEFAULT_REJECTION_NOTES,
            timezone.now(),
        )

        logger.info(f"Registration {registration.id} rejected by {reviewer.username}")
        return registration

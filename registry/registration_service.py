# registry/registration_service.py
import logging

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import default_storage
from django.utils import timezone
from django.utils.text import get_valid_filename

from .models import LandRegistration

logger = logging.getLogger(__name__)


class DocumentUploadError(Exception):
    """The supporting document could not be stored; nothing was submitted."""


def document_path(applicant, filename):
    stamp = timezone.now().strftime('%Y%m%d%H%M%S')
    return f"{settings.REGISTRATION_DOCUMENT_DIR}/{applicant.pk}/{stamp}_{get_valid_filename(filename)}"


def store_document(applicant, document):
    """Upload a document to default storage and return its stored name."""
    try:
        stored_name = default_storage.save(document_path(applicant, document.name), document)
    except (OSError, SuspiciousFileOperation) as e:
        logger.error(f"Document upload failed for applicant {applicant.pk}: {str(e)}", exc_info=True)
        raise DocumentUploadError(f"Could not upload document: {str(e)}") from e
    logger.info(f"Stored registration document {stored_name}")
    return stored_name


def submit_registration(applicant, fields, document=None):
    """
    Create one pending registration for an applicant.

    `fields` holds the validated property details. The document, when given,
    is uploaded before the row is inserted; an upload failure aborts the
    submission.
    """
    document_name = store_document(applicant, document) if document else None

    try:
        registration = LandRegistration.objects.create(
            applicant=applicant,
            status=LandRegistration.STATUS_PENDING,
            document=document_name,
            **fields,
        )
    except Exception:
        if document_name:
            default_storage.delete(document_name)
            logger.info(f"Removed orphaned document {document_name}")
        raise

    logger.info(f"✅ Registration {registration.id} submitted by user {applicant.pk} ({registration.title_deed_number})")
    return registration

import logging

from django.contrib.auth.models import User
from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import Profile, LandRegistration
from .realtime import change_feed, ChangeEvent, INSERT, UPDATE, DELETE
from .session import load_viewer_session, clear_viewer_session

logger = logging.getLogger(__name__)

REGISTRATIONS_TABLE = 'land_registrations'


@receiver(post_save, sender=User)
def create_profile(sender, instance, created, **kwargs):
    if created:
        Profile.objects.get_or_create(
            user=instance,
            defaults={'full_name': instance.get_full_name()}
        )


def _publish_registration_change(instance, event_type):
    event = ChangeEvent(
        table=REGISTRATIONS_TABLE,
        event_type=event_type,
        record_id=instance.pk,
        columns={
            'applicant_id': instance.applicant_id,
            'status': instance.status,
        },
    )
    # Listeners refetch, so only announce rows that are actually committed
    transaction.on_commit(lambda: change_feed.publish(event))


@receiver(post_save, sender=LandRegistration)
def registration_saved(sender, instance, created, **kwargs):
    _publish_registration_change(instance, INSERT if created else UPDATE)


@receiver(post_delete, sender=LandRegistration)
def registration_deleted(sender, instance, **kwargs):
    _publish_registration_change(instance, DELETE)


@receiver(user_logged_in)
def start_viewer_session(sender, request, user, **kwargs):
    if request is not None:
        request.viewer = load_viewer_session(request, user)
        logger.info(f"Viewer session loaded for {user.username} ({request.viewer.role})")


@receiver(user_logged_out)
def end_viewer_session(sender, request, user, **kwargs):
    if request is not None:
        request.viewer = clear_viewer_session(request)

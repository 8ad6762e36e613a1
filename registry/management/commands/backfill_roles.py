# registry/management/commands/backfill_roles.py
from django.contrib.auth.models import User
from django.core.management.base import BaseCommand

from registry.auth_service import assign_role
from registry.models import ROLE_CHOICES, ROLE_USER


class Command(BaseCommand):
    help = 'Assign a role to identities whose role insert failed at sign-up'

    def add_arguments(self, parser):
        parser.add_argument(
            '--role',
            choices=[value for value, label in ROLE_CHOICES],
            default=ROLE_USER,
            help='Role to give identities that have none'
        )

    def handle(self, *args, **options):
        role = options['role']
        users = User.objects.filter(role_assignment__isnull=True, is_superuser=False)
        fixed_count = 0

        for user in users:
            assign_role(user, role)
            fixed_count += 1
            self.stdout.write(f"Assigned role '{role}' to {user.username}")

        self.stdout.write(self.style.SUCCESS(f"Successfully assigned a role to {fixed_count} users"))

# registry/management/commands/seed_registrations.py
import random
from decimal import Decimal

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand

from registry.location_utils import quantize_coordinate
from registry.malawi_data import DISTRICT_CENTROIDS, LAND_USES
from registry.models import ROLE_LANDOWNER
from registry.registration_service import submit_registration


class Command(BaseCommand):
    help = 'Create pending land registrations for development'

    def add_arguments(self, parser):
        parser.add_argument('--count', type=int, default=5, help='Number of registrations to create')
        parser.add_argument('--applicant', type=str, required=True, help='Email of the land owner applying')

    def handle(self, *args, **options):
        count = options['count']
        email = options['applicant'].strip().lower()

        try:
            applicant = User.objects.get(username=email)
        except User.DoesNotExist:
            self.stdout.write(self.style.ERROR(f"❌ User '{email}' does not exist."))
            self.stdout.write(self.style.WARNING("Sign up as a land owner first, then re-run this command."))
            return

        role = getattr(getattr(applicant, 'role_assignment', None), 'role', None)
        if role != ROLE_LANDOWNER:
            self.stdout.write(self.style.WARNING(f"⚠️ {email} is not a land owner (role: {role}); seeding anyway."))

        areas = ["Area 47", "Area 25", "Chinsapo", "Ndirande", "Chilomoni", "Mchesi", "Kawale", "Chileka"]
        districts = list(DISTRICT_CENTROIDS)

        created_count = 0
        for i in range(count):
            district = random.choice(districts)
            lat, lng = DISTRICT_CENTROIDS[district]
            fields = {
                'title_deed_number': f"TD-{random.randint(10000, 99999)}",
                'land_size': Decimal(str(round(random.uniform(0.5, 20.0), 2))),
                'land_use': random.choice(LAND_USES),
                'location_name': f"{random.choice(areas)}, {district}",
                'latitude': quantize_coordinate(lat + random.uniform(-0.05, 0.05)),
                'longitude': quantize_coordinate(lng + random.uniform(-0.05, 0.05)),
                'district': district,
                'boundaries': "Bounded by a footpath to the north and a stream to the east",
            }
            registration = submit_registration(applicant, fields)
            created_count += 1
            self.stdout.write(f"Created registration {registration.id}: {registration.title_deed_number} in {district}")

        self.stdout.write(self.style.SUCCESS(f"✅ Created {created_count} pending registrations for {email}"))

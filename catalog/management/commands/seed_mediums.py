"""
Create the default mediums (CATALOG_DEFAULT_MEDIUMS, e.g. Sinhala / English / Tamil).

Run: python manage.py seed_mediums
     python manage.py seed_mediums Sinhala English --dry-run

Skips any medium whose name or slug is already in the catalog.
"""

from django.conf import settings
from django.core.management.base import BaseCommand

from catalog.store import MediumStore


class Command(BaseCommand):
    help = 'Create the default mediums (CATALOG_DEFAULT_MEDIUMS) if they do not exist yet'

    def add_arguments(self, parser):
        parser.add_argument(
            'names',
            nargs='*',
            help='Medium names to create (default: CATALOG_DEFAULT_MEDIUMS)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be created without saving',
        )

    def handle(self, *args, **options):
        names = options['names'] or list(settings.CATALOG_DEFAULT_MEDIUMS)
        dry_run = options['dry_run']
        store = MediumStore()

        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN – no changes will be saved'))
            missing = []
            for name in names:
                existing = store.find_by_name(name)
                if existing:
                    self.stdout.write(f'  Skip: medium "{name}" already exists (id={existing.id})')
                    continue
                self.stdout.write(self.style.SUCCESS(f'  Would create: {name} ({store.slug_for(name)})'))
                missing.append(name)
            self.stdout.write(self.style.WARNING(
                f'\nWould create {len(missing)} medium(s). Run without --dry-run to save.'
            ))
            return

        created = store.seed(names)
        for medium in created:
            self.stdout.write(self.style.SUCCESS(f'  Created: {medium.name} ({medium.normalized_name})'))
        self.stdout.write(self.style.SUCCESS(f'\nCreated {len(created)} medium(s).'))

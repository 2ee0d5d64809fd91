"""
Management command to audit index health over a sample of the catalog.
Usage: python manage.py audit_index_health [--sample N] [--quick] [--deadline S]
"""
import json

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from indexguard import conf
from indexguard.engine.audit import quick_health_check
from indexguard.engine.index import run_audit


class Command(BaseCommand):
    help = 'Sample airports and routes, run both indexing stages and print the report as JSON'

    def add_arguments(self, parser):
        parser.add_argument('--sample', type=int, default=None, help='Entities to sample per page type')
        parser.add_argument('--quick', action='store_true', help='Only print the rate and duplicate pattern count')
        parser.add_argument('--deadline', type=float, default=None, help='Stop after this many seconds')

    def handle(self, *args, **options):
        sample = options['sample']
        if sample is not None and sample < 1:
            raise CommandError('--sample must be a positive integer')

        deadline = options['deadline']
        if deadline is None:
            deadline = getattr(settings, 'INDEXGUARD_AUDIT_DEADLINE', None)

        kwargs = {
            'config': conf.get_engine_config(),
            'base_url': conf.get_base_url(),
            'max_workers': getattr(settings, 'INDEXGUARD_AUDIT_WORKERS', None),
            'deadline': deadline,
        }
        catalog = conf.get_catalog()

        if options['quick']:
            payload = quick_health_check(catalog, **kwargs)
        else:
            report = run_audit(catalog, sample, **kwargs)
            payload = report.as_dict()
            if not report.complete:
                self.stderr.write(self.style.WARNING(
                    f'Audit stopped early; {report.skipped_pages} entities were not evaluated'
                ))

        self.stdout.write(json.dumps(payload, indent=2))

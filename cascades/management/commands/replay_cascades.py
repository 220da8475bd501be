"""
Management command to finish cascades that did not fully apply.

Picks up every trigger record whose cascade status is not APPLIED and runs
the remaining steps. Steps already applied are skipped, so running the
command repeatedly is safe.

Run with: python manage.py replay_cascades [--model livestock.mortalityrecord] [--dry-run]
"""

from django.core.management.base import BaseCommand, CommandError

from cascades.engine import registry
from cascades.models import CascadeStatus


class Command(BaseCommand):
    help = 'Re-run pending, partial and failed cascades for trigger records'

    def add_arguments(self, parser):
        parser.add_argument(
            '--model',
            action='append',
            dest='models',
            help='Restrict to a trigger model label (app_label.modelname). Repeatable.',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be replayed without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        wanted = {label.lower() for label in options['models'] or []}

        unknown = wanted - set(registry.labels())
        if unknown:
            raise CommandError(
                f"Unknown trigger model(s): {', '.join(sorted(unknown))}. "
                f"Choose from: {', '.join(registry.labels())}"
            )

        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN - No changes will be made'))

        totals = {'replayed': 0, 'completed': 0, 'still_failing': 0}

        for model, cascade in registry.items():
            if wanted and model._meta.label_lower not in wanted:
                continue

            pending = model.objects.exclude(cascade_status=CascadeStatus.APPLIED).order_by('created_at')
            for record in pending.iterator():
                missing = [step.name for step in cascade.pending_steps(record)]
                self.stdout.write(
                    f"{model.__name__} {record.pk} [{record.cascade_status}] "
                    f"pending steps: {', '.join(missing) or '-'}"
                )
                if dry_run:
                    continue

                totals['replayed'] += 1
                if cascade.run(record) == CascadeStatus.APPLIED:
                    totals['completed'] += 1
                else:
                    totals['still_failing'] += 1
                    self.stdout.write(self.style.ERROR(f"  still failing: {record.cascade_error}"))

        self.stdout.write(
            self.style.SUCCESS(
                f"Replayed {totals['replayed']} record(s): "
                f"{totals['completed']} completed, {totals['still_failing']} still failing"
            )
        )

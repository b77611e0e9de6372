"""
Management command to bring stored credit statuses in line with the
derived ones.

Credits that pass their due date without any payment keep 'pending' in the
status column until something writes them. Reads always derive the status,
but reports that query the column directly need this refresh.

Usage:
    python manage.py refresh_credit_statuses
    python manage.py refresh_credit_statuses --dry-run
"""

from django.core.management.base import BaseCommand

from apps.credits.services import refresh_stored_statuses


class Command(BaseCommand):
    help = 'Persist the derived status of credits whose stored status drifted'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        drifted = refresh_stored_statuses(dry_run=dry_run)

        if not drifted:
            self.stdout.write(
                self.style.SUCCESS('All stored credit statuses are up to date.')
            )
            return

        self.stdout.write(f'\nFound {len(drifted)} credit(s) with a stale status:\n')

        for credit, previous in drifted:
            self.stdout.write(
                f'  - Credit #{credit.credit_id} | {credit.credit_amount} | '
                f'paid {credit.amount_paid} | due {credit.due_date} | '
                f'{previous} -> {credit.status}'
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(f'\nUpdated {len(drifted)} credit(s).')
        )

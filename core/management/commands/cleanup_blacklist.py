"""
Purge logged-out tokens whose JWT expiry has passed.
An expired token is rejected by signature checks anyway, so its blacklist
row no longer protects anything.
"""
from django.core.management.base import BaseCommand
from django.utils import timezone

from core.models import TokenBlacklist


class Command(BaseCommand):
    help = 'Delete blacklist rows for tokens that have already expired'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only report how many rows would be deleted',
        )

    def handle(self, *args, **options):
        expired = TokenBlacklist.objects.filter(expires_at__lt=timezone.now())

        if options['dry_run']:
            self.stdout.write(f'{expired.count()} expired token(s) would be removed')
            return

        deleted_count, _ = TokenBlacklist.cleanup_expired()
        self.stdout.write(
            self.style.SUCCESS(f'Removed {deleted_count} expired token(s) from blacklist')
        )
        self.stdout.write(f'Tokens still blacklisted: {TokenBlacklist.objects.count()}')

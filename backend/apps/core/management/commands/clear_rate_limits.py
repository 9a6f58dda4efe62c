# apps/core/management/commands/clear_rate_limits.py
"""
Reset rate limit counters

Unlocks a client that hit the global budget or the login/checkout
throttles, e.g. an operator locked out after mistyping the admin password.
"""
from django.core.cache import cache
from django.core.management.base import BaseCommand, CommandError

from apps.core.throttling import CheckoutThrottle, LoginThrottle
from apps.core.middleware import PERIOD_SECONDS

THROTTLE_SCOPES = [LoginThrottle.scope, CheckoutThrottle.scope]


class Command(BaseCommand):
    help = "Clear rate limit and throttle counters"

    def add_arguments(self, parser):
        target = parser.add_mutually_exclusive_group()
        target.add_argument("--ip", type=str, help="Client IP address to unlock")
        target.add_argument("--admin", type=str, help="Admin id whose session budget is reset")
        target.add_argument(
            "--all",
            action="store_true",
            help="Clear the whole cache (rate limits live in the default cache)",
        )

    def handle(self, *args, **options):
        if options["all"]:
            cache.clear()
            self.stdout.write(self.style.SUCCESS("Cleared all cache entries"))
            return

        if options["ip"]:
            keys = self._middleware_keys(f"ip:{options['ip']}")
            # DRF throttles key anonymous clients by IP
            keys += [f"throttle_{scope}_{options['ip']}" for scope in THROTTLE_SCOPES]
        elif options["admin"]:
            keys = self._middleware_keys(f"admin:{options['admin']}")
        else:
            raise CommandError("Pass --ip, --admin or --all")

        cleared = sum(1 for key in keys if cache.delete(key))
        self.stdout.write(self.style.SUCCESS(f"Cleared {cleared} counters"))

    @staticmethod
    def _middleware_keys(identifier):
        return [f"rate_limit:{identifier}:{period}" for period in PERIOD_SECONDS]

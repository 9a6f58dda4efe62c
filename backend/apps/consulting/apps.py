# backend/apps/consulting/apps.py
"""
Consulting app configuration

The wired service set lives on the app config for the life of the
process.
"""
import atexit
import logging

from django.apps import AppConfig, apps

logger = logging.getLogger(__name__)


class ConsultingConfig(AppConfig):
    name = "apps.consulting"
    label = "consulting"
    verbose_name = "Consulting"
    default_auto_field = "django.db.models.BigAutoField"

    services = None

    def ready(self):
        from apps.infrastructure.container import create_services

        self.services = create_services()
        atexit.register(self.shutdown)

    def shutdown(self):
        if self.services is not None:
            self.services.shutdown(wait=False)


def get_services():
    """Service registry of the running process"""
    return apps.get_app_config("consulting").services

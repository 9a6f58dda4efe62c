# apps/infrastructure/container.py

"""
Dependency Injection Container

Simple factory functions for creating fully-wired services.
No magic, no framework - just explicit construction.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import logging

from apps.domain.models import DomainException
from apps.infrastructure.config import get_config

logger = logging.getLogger(__name__)


# ============================================================
# ADAPTER FACTORIES
# ============================================================

def create_llm_provider(config: Dict[str, Any]):
    """
    Factory for LLM provider based on configuration

    Args:
        config: LLM configuration dict with 'type' key

    Returns:
        Implementation of ILLMProvider, or None when OpenRouter has no
        API key (the advisor then answers with its fallback paragraph)

    Raises:
        ValueError: If provider type is unknown
    """
    provider_type = config.get('type', 'fake')

    if provider_type == 'fake':
        from apps.adapters.llm.fake import FakeLLM
        return FakeLLM(
            response=config.get('response', 'Test response'),
            error=config.get('error'),
        )

    elif provider_type == 'openrouter':
        from apps.adapters.llm.openrouter import OpenRouterLLM

        api_key = config.get('api_key')
        if not api_key:
            logger.warning("OpenRouter API key not set, AI answers will use the fallback")
            return None

        return OpenRouterLLM(
            api_key=api_key,
            base_url=config.get('base_url', 'https://openrouter.ai/api/v1'),
            model=config.get('model', 'google/gemini-flash-1.5'),
            temperature=config.get('temperature', 0.7),
            max_tokens=config.get('max_tokens', 800)
        )

    else:
        raise ValueError(f"Unknown LLM provider type: {provider_type}")


def create_payment_gateway(config: Dict[str, Any]):
    """
    Factory for payment gateway based on configuration

    Returns:
        Implementation of IPaymentGateway, or None when Stripe keys are
        missing (checkout endpoints then answer 500)

    Raises:
        ValueError: If gateway type is unknown
    """
    gateway_type = config.get('type', 'fake')

    if gateway_type == 'fake':
        from apps.adapters.payments.fake import FakePaymentGateway
        return FakePaymentGateway(
            publishable_key=config.get('publishable_key', 'pk_test_fake')
        )

    elif gateway_type == 'stripe':
        from apps.adapters.payments.stripe_checkout import StripeCheckoutGateway

        secret_key = config.get('secret_key')
        if not secret_key:
            logger.warning("STRIPE_SECRET_KEY not set, checkout is disabled")
            return None

        return StripeCheckoutGateway(
            secret_key=secret_key,
            publishable_key=config.get('publishable_key', ''),
        )

    else:
        raise ValueError(f"Unknown payment gateway type: {gateway_type}")


def create_email_sender(config: Dict[str, Any]):
    """
    Factory for email sender

    Raises:
        ValueError: If sender type is unknown
    """
    sender_type = config.get('type', 'fake')

    if sender_type == 'fake':
        from apps.adapters.email.fake import FakeEmailSender
        return FakeEmailSender(fail=config.get('fail', False))

    elif sender_type == 'django':
        from apps.adapters.email.django_mail import DjangoEmailSender
        return DjangoEmailSender(from_email=config.get('from_email'))

    else:
        raise ValueError(f"Unknown email sender type: {sender_type}")


def create_task_runner(config: Dict[str, Any]):
    """
    Factory for detached task runner

    Raises:
        ValueError: If runner type is unknown
    """
    runner_type = config.get('type', 'inline')

    if runner_type == 'inline':
        from apps.adapters.tasks.inline import InlineTaskRunner
        return InlineTaskRunner()

    elif runner_type == 'thread':
        from apps.adapters.tasks.threaded import ThreadPoolTaskRunner
        return ThreadPoolTaskRunner(max_workers=config.get('workers', 4))

    else:
        raise ValueError(f"Unknown task runner type: {runner_type}")


def create_request_repository(use_inmemory: bool = False):
    """
    Factory for consulting request repository

    Args:
        use_inmemory: If True, use in-memory repo (for testing)

    Returns:
        Implementation of IRequestRepository
    """
    if use_inmemory:
        from apps.adapters.repositories.inmemory_repos import InMemoryRequestRepository
        return InMemoryRequestRepository()
    else:
        from apps.adapters.repositories.django_repos import DjangoRequestRepository
        return DjangoRequestRepository()


def create_canned_answer_repository(use_inmemory: bool = False):
    """
    Factory for canned answer repository

    Args:
        use_inmemory: If True, use in-memory repo (for testing)

    Returns:
        Implementation of ICannedAnswerRepository
    """
    if use_inmemory:
        from apps.adapters.repositories.inmemory_repos import InMemoryCannedAnswerRepository
        return InMemoryCannedAnswerRepository()
    else:
        from apps.adapters.repositories.django_repos import DjangoCannedAnswerRepository
        return DjangoCannedAnswerRepository()


def create_admin_credential_repository(use_inmemory: bool = False):
    """
    Factory for admin credential repository

    Returns:
        Implementation of IAdminCredentialRepository
    """
    if use_inmemory:
        from apps.adapters.repositories.inmemory_repos import InMemoryAdminCredentialRepository
        return InMemoryAdminCredentialRepository()
    else:
        from apps.adapters.repositories.django_repos import DjangoAdminCredentialRepository
        return DjangoAdminCredentialRepository()


# ============================================================
# SERVICE REGISTRY
# ============================================================

@dataclass
class ServiceRegistry:
    """
    Wired services for one process

    Built once when the consulting app is ready; shutdown() releases
    the task runner at process exit.
    """
    lifecycle: Any
    knowledge_base: Any
    admin_credentials: Any
    payment_gateway: Any
    notifier: Any
    task_runner: Any
    llm: Any = None
    config: Dict[str, Any] = field(default_factory=dict)

    def shutdown(self, wait: bool = True):
        self.task_runner.shutdown(wait=wait)


# ============================================================
# SERVICE FACTORIES
# ============================================================

def create_services(config: Optional[Dict] = None, use_inmemory_repos: bool = False) -> ServiceRegistry:
    """
    Create the fully-wired service set

    This is the main entry point used at app startup.

    Args:
        config: Optional configuration dict. If None, uses environment config.
        use_inmemory_repos: If True, use in-memory repos (for testing)

    Returns:
        ServiceRegistry with lifecycle and knowledge base services

    Example:
        >>> services = create_services()
        >>> services.lifecycle.list_requests()
        []
    """
    config = config or get_config()

    try:
        validate_config(config)

        if config['repositories'].get('type') == 'inmemory':
            use_inmemory_repos = True

        from apps.domain.prompts.template import PromptTemplate
        from apps.domain.services.advisor_service import AdvisorService
        from apps.domain.services.knowledge_base_service import KnowledgeBaseService
        from apps.domain.services.lifecycle_service import RequestLifecycleService
        from apps.domain.services.notification_service import NotificationService

        llm = create_llm_provider(config['llm'])
        payment_gateway = create_payment_gateway(config['payments'])
        sender = create_email_sender(config['email'])
        task_runner = create_task_runner(config['tasks'])

        request_repo = create_request_repository(use_inmemory=use_inmemory_repos)
        canned_repo = create_canned_answer_repository(use_inmemory=use_inmemory_repos)
        admin_repo = create_admin_credential_repository(use_inmemory=use_inmemory_repos)

        advisor = AdvisorService(
            llm=llm,
            prompt_template=PromptTemplate(version=config.get('prompt_version', 'v1.0')),
        )
        notifier = NotificationService(
            sender=sender,
            admin_email=config.get('admin_email'),
            site_url=config.get('site_url', ''),
        )

        lifecycle = RequestLifecycleService(
            request_repo=request_repo,
            canned_repo=canned_repo,
            payment_gateway=payment_gateway,
            advisor=advisor,
            notifier=notifier,
            task_runner=task_runner,
            resolve_on_submit=config.get('resolve_on_submit', False),
        )

        logger.info(
            f"Created services with llm={config['llm']['type']}, "
            f"payments={config['payments']['type']}, "
            f"email={config['email']['type']}, "
            f"tasks={config['tasks']['type']}"
        )

        return ServiceRegistry(
            lifecycle=lifecycle,
            knowledge_base=KnowledgeBaseService(canned_repo=canned_repo),
            admin_credentials=admin_repo,
            payment_gateway=payment_gateway,
            notifier=notifier,
            task_runner=task_runner,
            llm=llm,
            config=config,
        )

    except Exception as e:
        logger.error(f"Failed to create services: {e}")
        raise DomainException(f"Service initialization failed: {e}")


# ============================================================
# VALIDATION
# ============================================================

def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if valid

    Raises:
        ValueError: If configuration is invalid
    """
    required_keys = ['llm', 'payments', 'email', 'tasks', 'repositories']

    for key in required_keys:
        if key not in config:
            raise ValueError(f"Missing required config key: {key}")

        if 'type' not in config[key]:
            raise ValueError(f"{key} config missing 'type' key")

    workers = config['tasks'].get('workers', 1)
    if not isinstance(workers, int) or workers < 1:
        raise ValueError("Task runner needs at least one worker")

    return True


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_service_info(config: Optional[Dict] = None) -> Dict[str, Any]:
    """
    Get information about configured services

    Args:
        config: Optional config dict, uses environment config if None

    Returns:
        Dict with service configuration info (no secrets)
    """
    config = config or get_config()

    return {
        'environment': config.get('environment', 'unknown'),
        'llm': {
            'type': config['llm'].get('type'),
            'model': config['llm'].get('model', 'N/A'),
            'configured': bool(config['llm'].get('api_key')) or config['llm'].get('type') == 'fake',
        },
        'payments': {
            'type': config['payments'].get('type'),
            'configured': bool(config['payments'].get('secret_key'))
            or config['payments'].get('type') == 'fake',
        },
        'email': {'type': config['email'].get('type')},
        'tasks': {
            'type': config['tasks'].get('type'),
            'workers': config['tasks'].get('workers', 1),
        },
        'admin_alerts': bool(config.get('admin_email')),
        'prompt_version': config.get('prompt_version', 'v1.0'),
    }

"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
The process-lifetime stores live in app.state, created at startup.
"""

from functools import lru_cache
from typing import Any

from fastapi import Request

from src.adapters.memory import InMemoryAccountStore, InMemorySecretStore, InMemoryVerificationLedger
from src.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from src.adapters.stellar import SimulatedLedgerRegistrar, StellarKeypairGenerator
from src.config.settings import Settings, get_settings
from src.domain.ports import EmailSender
from src.domain.registration import RegistrationService

# Module-level singletons - both adapters are stateless
_keypair_generator = StellarKeypairGenerator()
_registrar = SimulatedLedgerRegistrar()


def init_stores(state: Any) -> None:
    """Attach fresh in-memory stores to an application state object."""
    state.ledger = InMemoryVerificationLedger()
    state.accounts = InMemoryAccountStore()
    state.secrets = InMemorySecretStore()


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the email transport named by settings.email_backend."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_addr=settings.mail_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
        )
    return ConsoleEmailSender()


@lru_cache
def get_email_sender() -> EmailSender:
    """Get the configured email sender (singleton)."""
    return build_email_sender(get_settings())


def build_registration_service(state: Any, settings: Settings) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires the stores held in app state together with the mail,
    keypair and ledger adapters.
    """
    return RegistrationService(
        ledger=state.ledger,
        accounts=state.accounts,
        secrets=state.secrets,
        email_sender=get_email_sender(),
        keypair_generator=_keypair_generator,
        registrar=_registrar,
        base_url=settings.base_url,
        app_name=settings.app_name,
        ttl_seconds=settings.token_ttl_seconds,
    )


def get_registration_service(request: Request) -> RegistrationService:
    """Create registration service over the stores in app state."""
    return build_registration_service(request.app.state, get_settings())

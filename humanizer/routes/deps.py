"""Shared route dependencies. Override these in tests via app.dependency_overrides."""

from fastapi import Depends
from supabase import Client

from ..config import Settings, get_settings
from ..middleware.auth import get_supabase_client
from ..services.humanizations import HumanizationStore
from ..services.input_validator import InputValidator
from ..services.orchestrator import HumanizationOrchestrator
from ..services.profile import ProfileService
from ..services.rewrite_adapter import RewriteAdapter, get_rewrite_adapter
from ..services.rewrite_client import RewriteService, get_rewrite_service


def get_adapter(settings: Settings = Depends(get_settings)) -> RewriteAdapter:
    return get_rewrite_adapter(settings)


def get_rewrite_service_dep(settings: Settings = Depends(get_settings)) -> RewriteService:
    return get_rewrite_service(settings)


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    supabase: Client = Depends(get_supabase_client),
    rewrite_service: RewriteService = Depends(get_rewrite_service_dep)
) -> HumanizationOrchestrator:
    return HumanizationOrchestrator(
        profiles=ProfileService(supabase),
        humanizations=HumanizationStore(supabase),
        rewrite_service=rewrite_service,
        validator=InputValidator(
            min_length=settings.min_text_length,
            max_length=settings.max_text_length
        )
    )

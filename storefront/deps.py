# storefront/deps.py
"""FastAPI dependencies resolving the per-application singletons."""

from fastapi import Request

from .config import Settings
from .purchase.stripe_service import PaymentProcessor
from .storage import CatalogStore


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_processor(request: Request) -> PaymentProcessor:
    return request.app.state.processor

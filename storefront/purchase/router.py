"""
Route definitions for the purchase flow.

Endpoints under /api:
- POST /purchase/{album_id}        : simulated purchase acknowledgement
- POST /create-payment-intent      : Stripe Checkout Session for one album

Both check that the album exists and is released before doing anything.
No order is recorded and no payment data passes through this service.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from ..catalog.router import find_album, parse_album_id
from ..catalog.schemas import Album, AlbumSummary
from ..config import Settings
from ..deps import get_processor, get_settings, get_store
from ..errors import InternalError, PreconditionError, UpstreamError, internal_errors
from ..storage import CatalogStore
from .schemas import PaymentIntentRequest, PaymentIntentResponse, PurchaseResponse
from .stripe_service import (
    CheckoutRequest,
    PaymentProcessor,
    PaymentProcessorError,
    to_minor_units,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["purchase"])


def purchasable_album(store: CatalogStore, album_id: int) -> Album:
    album = find_album(store, album_id)
    if not album.is_released:
        raise PreconditionError("Album not yet released")
    return album


@router.post(
    "/purchase/{album_id}",
    response_model=PurchaseResponse,
    response_model_exclude_none=True,
)
def purchase_album(
    album_id: str,
    store: CatalogStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> PurchaseResponse:
    parsed = parse_album_id(album_id)
    with internal_errors("Purchase failed"):
        album = purchasable_album(store, parsed)
        logger.info("Processing purchase for album %d: %s", album.id, album.title)

        if settings.purchase_mode == "coming_soon":
            return PurchaseResponse(
                success=True,
                message="Payment system upgrade in progress",
                album=AlbumSummary.from_album(album),
            )
        return PurchaseResponse(
            success=True,
            message="Purchase successful",
            download_url=f"/download/{album.id}",
        )


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    body: PaymentIntentRequest,
    request: Request,
    store: CatalogStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    processor: PaymentProcessor = Depends(get_processor),
) -> PaymentIntentResponse:
    with internal_errors("Error creating checkout session"):
        album = purchasable_album(store, body.album_id)
        if album.price is None:
            raise InternalError(f"Album {album.id} is released but has no price")

        origin = request.headers.get("origin") or settings.public_base_url
        checkout = CheckoutRequest(
            amount=to_minor_units(album.price),
            currency=settings.currency,
            product_name=album.title,
            description=f"Digital download of {album.title} by {settings.artist_name}",
            success_url=f"{origin}/?success=true&album={album.id}",
            cancel_url=f"{origin}/?canceled=true",
            metadata={"albumId": str(album.id), "albumTitle": album.title},
        )
        try:
            session = processor.create_checkout_session(checkout)
        except PaymentProcessorError as exc:
            raise UpstreamError(f"Error creating checkout session: {exc.reason}") from exc

        return PaymentIntentResponse(
            session_id=session.session_id,
            url=session.url,
            album=AlbumSummary.from_album(album),
        )

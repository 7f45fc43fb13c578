from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..catalog.schemas import AlbumSummary


class PaymentIntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Strict: "2" or true is a malformed body, not album 2 or album 1.
    album_id: int = Field(alias="albumId", strict=True)


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    url: Optional[str] = None
    album: AlbumSummary


class PurchaseResponse(BaseModel):
    """Acknowledgement for the simulated purchase.

    ``download_url`` is set in ``download`` mode and ``album`` in
    ``coming_soon`` mode; the unset one is left out of the body.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
    album: Optional[AlbumSummary] = None

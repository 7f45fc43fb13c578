"""
Pydantic schema definitions for the catalog module.

``Album`` is the record held by the store and returned by the catalog
endpoints. Field names are snake_case in Python and camelCase on the
wire (``coverImage``, ``isReleased`` ...) because the storefront front-end
was written against that shape. ``AlbumCreate`` is everything but the id,
which the store assigns. ``AlbumSummary`` is the denormalised view sent
back with purchase responses so the client can render a receipt without
a second request.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AlbumCreate(_CamelModel):
    """Fields accepted when adding an album to the store.

    Optional fields left unset become ``None``. ``price`` is kept as the
    decimal string it was given ("5.00") so that it is echoed back
    exactly; it only has to parse as a non-negative decimal.
    """

    title: str = Field(min_length=1)
    catalog: str
    cover_image: str
    release_date: Optional[str] = None
    price: Optional[str] = None
    is_released: bool = False
    preview_url: Optional[str] = None
    purchase_url: Optional[str] = None

    @field_validator("price")
    @classmethod
    def _check_price(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"price {value!r} is not a decimal number")
        if not amount.is_finite() or amount < 0:
            raise ValueError(f"price {value!r} must be a non-negative decimal")
        return value


class Album(AlbumCreate):
    id: int = Field(gt=0)


class AlbumSummary(_CamelModel):
    id: int
    title: str
    price: Optional[str] = None
    cover_image: str

    @classmethod
    def from_album(cls, album: Album) -> "AlbumSummary":
        return cls(
            id=album.id,
            title=album.title,
            price=album.price,
            cover_image=album.cover_image,
        )

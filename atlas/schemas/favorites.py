"""Schemas for favorite-country endpoints.

Entries use the same {code, name, flag} shape as the client-local list kept by
unauthenticated browsers, so either source can be rendered without conversion.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

COUNTRY_CODE_PATTERN = r"^[A-Za-z]{3}$"


class FavoriteEntry(BaseModel):
    """A saved country: ISO 3166-1 alpha-3 code, display name and flag image URL."""

    code: str = Field(..., description="ISO 3166-1 alpha-3 country code")
    name: str = Field(default="", description="Country display name")
    flag: str = Field(default="", description="Flag image URL")


class FavoriteToggleRequest(BaseModel):
    """Body for PUT /favorites/toggle."""

    model_config = ConfigDict(populate_by_name=True)

    country_code: str = Field(
        ...,
        alias="countryCode",
        pattern=COUNTRY_CODE_PATTERN,
        description="ISO 3166-1 alpha-3 country code",
    )
    country_name: str = Field(default="", alias="countryName", max_length=255)
    flag_url: str = Field(default="", alias="flagUrl", max_length=2048)

    @field_validator("country_code")
    @classmethod
    def upper_country_code(cls, v: str) -> str:
        return v.upper()


class FavoritesResponse(BaseModel):
    """Full favorite collection in insertion order."""

    model_config = ConfigDict(populate_by_name=True)

    favorite_countries: list[FavoriteEntry] = Field(
        default_factory=list,
        alias="favoriteCountries",
    )

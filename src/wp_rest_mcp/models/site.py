"""Site configuration models"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilterPolicy(BaseModel):
    """Include/exclude lists applied to synthesized tool names.

    Entries are exact tool names, or regular expressions when wrapped in
    slashes (``/.*_delete_.*/``).
    """

    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")


class RawSiteEntry(BaseModel):
    """One entry of the WP_SITES map, as written by the operator"""

    url: str = Field(..., alias="URL", min_length=1)
    user: str = Field(..., alias="USER", min_length=1)
    password: str = Field(..., alias="PASS", min_length=1)
    filters: FilterPolicy | None = Field(None, alias="FILTERS")

    model_config = ConfigDict(extra="allow")


class SiteConfig(BaseModel):
    """Normalized configuration for one WordPress site"""

    alias: str = Field(..., min_length=1, description="Lowercased site alias")
    url: str = Field(..., description="Site base URL without trailing slash")
    username: str
    credential: str = Field(..., repr=False)
    filters: FilterPolicy = Field(default_factory=FilterPolicy)

    model_config = ConfigDict(frozen=True)

    @field_validator("alias")
    @classmethod
    def normalize_alias(cls, value: str) -> str:
        return value.lower()

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_entry(cls, alias: str, entry: RawSiteEntry) -> "SiteConfig":
        return cls(
            alias=alias,
            url=entry.url,
            username=entry.user,
            credential=entry.password,
            filters=entry.filters or FilterPolicy(),
        )

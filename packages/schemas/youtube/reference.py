"""Channel reference schemas.

A raw user input is classified into one or more typed references, each paired
with the provider operation that can look it up and a priority rank.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ReferenceKind(str, Enum):
    """Kinds of channel reference the classifier can produce."""

    CHANNEL_ID = "channel_id"
    HANDLE = "handle"
    USERNAME = "username"
    CUSTOM_URL = "custom_url"
    VANITY = "vanity"


class ProviderOperation(str, Enum):
    """Provider port operations a candidate can be executed with."""

    LOOKUP_BY_ID = "lookup_by_id"
    LOOKUP_BY_HANDLE = "lookup_by_handle"
    LOOKUP_BY_USERNAME = "lookup_by_username"
    LOOKUP_BY_CUSTOM_URL = "lookup_by_custom_url"
    SEARCH_BY_TEXT = "search_by_text"


OPERATION_FOR_KIND: dict[ReferenceKind, ProviderOperation] = {
    ReferenceKind.CHANNEL_ID: ProviderOperation.LOOKUP_BY_ID,
    ReferenceKind.HANDLE: ProviderOperation.LOOKUP_BY_HANDLE,
    ReferenceKind.USERNAME: ProviderOperation.LOOKUP_BY_USERNAME,
    ReferenceKind.CUSTOM_URL: ProviderOperation.LOOKUP_BY_CUSTOM_URL,
    ReferenceKind.VANITY: ProviderOperation.SEARCH_BY_TEXT,
}


class ChannelReference(BaseModel):
    """A typed channel reference.

    Exactly one kind is active per reference. ``value`` is the normalized token
    sent upstream; ``raw`` is the untouched user input kept for diagnostics.
    """

    model_config = ConfigDict(frozen=True)

    kind: ReferenceKind = Field(..., description="Reference kind")
    value: str = Field(..., min_length=1, description="Normalized lookup token")
    raw: str = Field(..., description="Original input string")


class ResolutionCandidate(BaseModel):
    """A reference scheduled for lookup, lower priority first."""

    model_config = ConfigDict(frozen=True)

    reference: ChannelReference
    priority: int = Field(..., ge=0, description="Attempt order (0 = first)")

    @property
    def kind(self) -> ReferenceKind:
        return self.reference.kind

    @property
    def query(self) -> str:
        return self.reference.value

    @property
    def operation(self) -> ProviderOperation:
        """Provider operation this candidate must be executed with."""
        return OPERATION_FOR_KIND[self.reference.kind]


__all__ = [
    "OPERATION_FOR_KIND",
    "ChannelReference",
    "ProviderOperation",
    "ReferenceKind",
    "ResolutionCandidate",
]

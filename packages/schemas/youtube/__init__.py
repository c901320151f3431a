"""YouTube channel schemas.

References produced by classification, normalized provider results, and the
resolved channel records returned to callers.
"""

from packages.schemas.youtube.channel import (
    CanonicalChannel,
    ChannelMetadata,
    ChannelStatistics,
    Provenance,
    Unavailable,
    UnavailableReason,
    unavailable,
)
from packages.schemas.youtube.provider import (
    ChannelRecord,
    PlaylistPage,
    PlaylistVideo,
    ProviderResult,
    RegionRestrictions,
    ResponseShape,
    Subscription,
    SubscriptionPage,
    VerificationStatus,
)
from packages.schemas.youtube.reference import (
    OPERATION_FOR_KIND,
    ChannelReference,
    ProviderOperation,
    ReferenceKind,
    ResolutionCandidate,
)

__all__ = [
    "OPERATION_FOR_KIND",
    "CanonicalChannel",
    "ChannelMetadata",
    "ChannelRecord",
    "ChannelReference",
    "ChannelStatistics",
    "PlaylistPage",
    "PlaylistVideo",
    "Provenance",
    "ProviderOperation",
    "ProviderResult",
    "ReferenceKind",
    "RegionRestrictions",
    "ResolutionCandidate",
    "ResponseShape",
    "Subscription",
    "SubscriptionPage",
    "Unavailable",
    "UnavailableReason",
    "VerificationStatus",
    "unavailable",
]

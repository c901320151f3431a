"""Channel resolution engine.

Classifier -> Pipeline -> Redirect Detector -> Metadata Aggregator. The engine
performs no network I/O itself; it calls a ChannelDataProvider.
"""

from __future__ import annotations

from packages.core.resolution.aggregator import MetadataAggregator
from packages.core.resolution.cancellation import run_cancellable
from packages.core.resolution.classifier import classify, classify_as, normalize
from packages.core.resolution.pipeline import (
    CandidateOutcome,
    CandidateStatus,
    Resolution,
    ResolutionPipeline,
)
from packages.core.resolution.redirect_detector import RedirectDetector

__all__ = [
    "CandidateOutcome",
    "CandidateStatus",
    "MetadataAggregator",
    "RedirectDetector",
    "Resolution",
    "ResolutionPipeline",
    "classify",
    "classify_as",
    "normalize",
    "run_cancellable",
]

"""Client adapters for external systems.

Heavy dependencies (httpx, upstream wire formats) belong here, not in packages/core.
"""

from packages.clients.innertube import InnertubeClient
from packages.clients.youtube_data_api import YouTubeDataAPIClient
from packages.clients.youtube_provider import YouTubeChannelProvider

__all__ = ["InnertubeClient", "YouTubeChannelProvider", "YouTubeDataAPIClient"]

"""ChannelScope CLI commands package.

- resolve: resolve a channel reference into metadata
- classify: show how a reference would be tried, offline
- listings: subscriptions and uploads pages
- serve: run the HTTP API
"""

"""ChannelScope CLI - Typer command-line interface for channel resolution."""

"""Clients for external API interactions."""
from website_updater.clients.directory_client import DirectoryClient
from website_updater.clients.openai_client import OpenAIClient
from website_updater.clients.search_client import SearchClient

__all__ = ["DirectoryClient", "OpenAIClient", "SearchClient"]

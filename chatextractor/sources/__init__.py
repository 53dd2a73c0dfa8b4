"""Conversation sources: identifier discovery, retrieval and page links."""

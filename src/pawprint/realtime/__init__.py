"""Realtime push channel."""

from .gateway import NEW_POST_EVENT, FeedNamespace, get_gateway, set_gateway

__all__ = ["NEW_POST_EVENT", "FeedNamespace", "get_gateway", "set_gateway"]

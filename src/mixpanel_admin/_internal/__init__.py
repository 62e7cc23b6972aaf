"""Internal implementation modules. Not part of the public API."""

from mixpanel_admin._internal.api_client import MixpanelAPIClient
from mixpanel_admin._internal.config import ClientOptions, ConfigManager, Credentials
from mixpanel_admin._internal.rate_limiter import RateLimiter

__all__ = [
    "ClientOptions",
    "ConfigManager",
    "Credentials",
    "MixpanelAPIClient",
    "RateLimiter",
]

"""Client helpers for the Microsoft MVP activities API."""

from __future__ import annotations

__all__ = [
    "MVP_API_BASE",
    "TENANT",
    "MVPAPIError",
    "MVPActivitiesClient",
    "MVPClientNotInitializedError",
    "MVPConfigurationError",
    "MVPError",
    "SubmittedActivitiesResult",
    "UserProfile",
]

MVP_API_BASE = "https://mavenapi-prod.azurewebsites.net"
TENANT = "MVP"

from .client import (  # noqa: E402
    MVPActivitiesClient,
    MVPAPIError,
    MVPClientNotInitializedError,
    MVPConfigurationError,
    MVPError,
    SubmittedActivitiesResult,
)
from .profile import UserProfile  # noqa: E402

"""Service layer for mixpanel_admin.

This package contains service classes that turn raw API client responses
into typed values and compose multi-step operations.
"""

from mixpanel_admin._internal.services.organizations import OrganizationService
from mixpanel_admin._internal.services.project_resource import ProjectResource
from mixpanel_admin._internal.services.projects import ProjectService
from mixpanel_admin._internal.services.timezones import TimezoneService

__all__ = [
    "OrganizationService",
    "ProjectResource",
    "ProjectService",
    "TimezoneService",
]

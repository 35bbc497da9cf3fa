"""
Core services. Each service receives its database session and (optional)
cache handle explicitly and returns a ``ServiceResponse``; no exception
crosses a service boundary.
"""

from .responses import (
    ServiceResponse as ServiceResponse,
    ServiceResponseType as ServiceResponseType,
)
from .collaboration import CollaborationService as CollaborationService
from .projects import ProjectService as ProjectService
from .profiles import ProfileService as ProfileService
from .search_cache import ProjectSearchCache as ProjectSearchCache

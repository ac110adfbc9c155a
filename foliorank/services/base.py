"""
Base service class for the FolioRank review engine.

Provides the injected repository, the timezone that fixes calendar
boundaries, and an overridable clock for all service layer operations.
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from foliorank.config import Config
from foliorank.database.repository import Repository

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for all services that talk to the repository."""
    
    def __init__(self, repository: Repository, tz: Optional[tzinfo] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize base service with its collaborators.
        
        Args:
            repository: Data-access implementation
            tz: Timezone for day, week and month boundaries (defaults to Config.TIMEZONE)
            clock: Returns the current aware datetime (defaults to the system clock)
        """
        self.repository = repository
        self.tz = tz or Config.get_timezone()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
    
    def now(self) -> datetime:
        """Current time in the service timezone."""
        moment = self._clock()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(self.tz)

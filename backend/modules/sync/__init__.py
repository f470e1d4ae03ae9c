"""modules/sync — optimistic in-memory view over the active persistence backend."""

from modules.sync.coordinator import ActivityNotFoundError, DayNotFoundError, ItineraryCoordinator

__all__ = ["ActivityNotFoundError", "DayNotFoundError", "ItineraryCoordinator"]

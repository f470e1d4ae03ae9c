"""schemas — itinerary entity definitions."""

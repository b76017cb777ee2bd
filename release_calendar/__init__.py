"""Episode release scheduling and month calendar for tracked series."""

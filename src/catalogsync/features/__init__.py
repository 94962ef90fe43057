"""Feature slices of the synchronization pipeline."""

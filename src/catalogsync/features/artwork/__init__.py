"""Album artwork discovery and rendition generation."""

"""Tag extraction and track delta building."""

"""Platform adapters: persistence, logging and filesystem helpers."""

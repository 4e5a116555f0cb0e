"""Application layer – dispatch use cases and the email notification processor."""

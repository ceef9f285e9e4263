"""Application layer: use cases coordinating repositories."""

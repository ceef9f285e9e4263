"""Use cases exposed to the interface layer."""

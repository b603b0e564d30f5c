"""Infrastructure adapters implementing service-layer ports."""

"""Domain model, resource index and section slicing."""

"""Export adapters."""

"""Host-side adapters supplying artifacts to the check."""

"""Archive access for duplicate class detection."""

"""Web API for manuscript structure detection."""

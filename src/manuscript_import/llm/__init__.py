"""Client for the external text-analysis AI service."""

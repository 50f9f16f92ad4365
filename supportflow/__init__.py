"""Support conversation lifecycle service."""

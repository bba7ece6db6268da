"""Price-alert evaluation and notification delivery service."""

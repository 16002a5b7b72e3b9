"""landdesk -- multi-tenant real-estate back office service."""

__version__ = "0.1.0"

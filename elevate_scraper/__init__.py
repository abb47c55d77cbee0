"""Balance and transaction history scraper for Elevate 401k accounts."""

__version__ = "0.1.0"

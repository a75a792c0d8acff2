"""Maps Business Crawler: Google Maps category + postal code search to flat business records."""

__version__ = "0.1.0"

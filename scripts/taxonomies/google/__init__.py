from .source import GoogleSource, parse_google_taxonomy

__all__ = ["GoogleSource", "parse_google_taxonomy"]

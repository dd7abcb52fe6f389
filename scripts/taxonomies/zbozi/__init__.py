from .source import ZboziSource, parse_zbozi_json

__all__ = ["ZboziSource", "parse_zbozi_json"]

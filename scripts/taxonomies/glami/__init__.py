from .source import GlamiSource, parse_glami_xml

__all__ = ["GlamiSource", "parse_glami_xml"]

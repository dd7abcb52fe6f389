from .source import HeurekaSource, parse_heureka_xml

__all__ = ["HeurekaSource", "parse_heureka_xml"]

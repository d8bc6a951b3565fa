"""Utility modules for moviedb."""

from moviedb.utils.json import DateTimeEncoder, dumps_body

__all__ = ["DateTimeEncoder", "dumps_body"]

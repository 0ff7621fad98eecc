"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import os
from datetime import datetime, timezone


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.50KB, 3.20MB).
        """
        if size_bytes < 0:
            return "0B"

        units = ["B", "KB", "MB", "GB", "TB", "PB"]
        for unit in units:
            if size_bytes < 1024:
                return f"{size_bytes:.2f}{unit}"
            size_bytes /= 1024
        return f"{size_bytes:.2f}EB"

    @staticmethod
    def datetime_to_rfc3339(value: datetime) -> str:
        """
        Format a datetime as UTC 'YYYY-MM-DDTHH:MM:SSZ'.
        Naive datetimes are taken as UTC.
        """
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    @staticmethod
    def fs_name_to_text(name: str) -> str:
        """
        Name as printable text. Bytes that were not valid in the filesystem
        encoding become U+FFFD instead of lone surrogates.
        """
        return os.fsencode(name).decode("utf-8", "replace")

    @staticmethod
    def mbps(num_bytes: int, seconds: float) -> float:
        """Throughput in decimal megabits per second."""
        if seconds <= 0:
            return 0.0
        return (num_bytes / 1e6) * 8 / seconds

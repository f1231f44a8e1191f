"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import time


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to a string with a binary prefix (e.g. 1.50 KiB, 3.20 MiB).
        """
        if size_bytes < 0:
            return "0 B"

        units = ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]
        value = float(size_bytes)
        for unit in units:
            if value < 1024:
                return f"{value:.2f} {unit}"
            value /= 1024
        return f"{value:.2f} EiB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Supports formats: '1.5GB', '2048KB', '1000', '1K', '1M', '1G', '4KiB'.
        Raises ValueError for negative sizes or invalid formats.
        """
        size_str = str(size_str).strip().upper()

        units = {
            'PIB': 1024 ** 5, 'PB': 1024 ** 5, 'P': 1024 ** 5,
            'TIB': 1024 ** 4, 'TB': 1024 ** 4, 'T': 1024 ** 4,
            'GIB': 1024 ** 3, 'GB': 1024 ** 3, 'G': 1024 ** 3,
            'MIB': 1024 ** 2, 'MB': 1024 ** 2, 'M': 1024 ** 2,
            'KIB': 1024, 'KB': 1024, 'K': 1024,
            'B': 1,
        }

        # Longest suffix first so 'KB' is not read as 'K' + 'B'
        for unit in sorted(units.keys(), key=len, reverse=True):
            if size_str.endswith(unit):
                value_str = size_str[:-len(unit)].strip()
                try:
                    value = float(value_str)
                except ValueError:
                    raise ValueError(f"Invalid numeric value in size: '{value_str}'")

                if value < 0:
                    raise ValueError(f"Negative size not allowed: '{size_str}'")
                return int(value * units[unit])

        try:
            value = int(size_str)
        except ValueError:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 4096, 4K, 4KB, 1.5MB, etc."
            )

        if value < 0:
            raise ValueError(f"Negative size not allowed: '{size_str}'")
        return value

    @staticmethod
    def ns_to_human(timestamp_ns: int, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """
        Convert a nanosecond Unix timestamp (st_mtime_ns) to local time.
        """
        try:
            return time.strftime(fmt, time.localtime(timestamp_ns / 1_000_000_000))
        except (OverflowError, OSError, ValueError):
            return "Invalid timestamp"

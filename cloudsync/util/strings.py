"""String utilities"""

from datetime import datetime


def human_size(size: int) -> str:
    """Shows a size in bytes in a more readable way"""
    units = ("bytes", "kB", "MB", "GB", "TB", "PB")
    unit_index = 0
    while size > 1024 and unit_index < len(units) - 1:
        size = size / 1024
        unit_index += 1
    return "%0.1f %s" % (size, units[unit_index])


def format_date(date: datetime) -> str:
    """Return the date and time in the representation of the current LC_TIME locale"""
    return date.strftime("%x %X")

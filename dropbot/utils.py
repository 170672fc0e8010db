"""
Module: dropbot/utils.py

Provides utility functions for logging, parsing intervals, and sanitizing file names.
"""
import inspect, os, re
from datetime import datetime, timedelta, UTC
from colorama import init, Fore, Style

init(autoreset=True)

def log_message(message, level="info"):
    """
    Print a timestamped, colored log message with the caller's relative source path.

    Parameters:
    - message: The log message string.
    - level: One of "info", "debug", "warning", or "error" for coloring.
    """

    frame    = inspect.currentframe().f_back
    fullpath = frame.f_code.co_filename
    cwd      = os.getcwd()
    if fullpath.startswith(cwd + os.sep):
        filename = fullpath[len(cwd)+1:]
    else:
        filename = fullpath
    lineno   = frame.f_lineno

    timestamp = f"[{datetime.now(UTC).strftime('%Y-%m-%d %H:%M:%S')}]"
    color_map = {
        "info": Fore.GREEN,
        "debug": Fore.BLUE,
        "warning": Fore.YELLOW,
        "error": Fore.RED
    }
    level_prefix = f"{level.upper():<7}"
    level_color = color_map.get(level.lower(), Fore.WHITE)

    prefix = f"[{timestamp}] {filename}({lineno}):"
    print(f"{prefix} {level_color}{level_prefix} {message}{Style.RESET_ALL}")


def parse_interval(interval_str):
    """
    Parse an interval string into a (value, unit) tuple.

    Supported formats: digits + unit, where unit is one of
    s, m, h, d, w, optionally with suffixes like "min", "hours", "days".

    Returns (int(value), str(unit)) if valid, otherwise (None, None).
    """
    if not interval_str:
        return None, None
    pattern = r'^(\d+)\s*([smhdw])(?:ec(?:ond)?|in(?:ute)?|our|ay|(?:ee)?k)?s?$'
    match = re.match(pattern, interval_str.strip(), re.IGNORECASE)
    if not match:
        return None, None
    return int(match.group(1)), match.group(2).lower()


def interval_to_timedelta(value, unit):
    """
    Convert an interval value and unit into a timedelta.

    Supported units:
      s - seconds
      m - minutes
      h - hours
      d - days
      w - weeks

    Returns a datetime.timedelta or None if the unit is invalid.
    """

    # Guard against missing or invalid inputs
    if value is None or unit is None:
        return None

    delta_map = {
        's': timedelta(seconds=value),
        'm': timedelta(minutes=value),
        'h': timedelta(hours=value),
        'd': timedelta(days=value),
        'w': timedelta(weeks=value)
    }
    return delta_map.get(unit)


def parse_duration(interval_str):
    """
    Parse an interval string straight into a timedelta, or None if it is invalid.
    """
    return interval_to_timedelta(*parse_interval(interval_str))


def format_interval(delta):
    """
    Render a timedelta using the largest unit that divides it evenly (e.g. "90m", "2h", "1w").
    """
    seconds = int(delta.total_seconds())
    for unit, size in (('w', 604800), ('d', 86400), ('h', 3600), ('m', 60)):
        if seconds and seconds % size == 0:
            return f"{seconds // size}{unit}"
    return f"{seconds}s"


def sanitize_filename(name):
    """
    Reduce a user supplied file name to its final path component so it cannot
    escape the files directory.
    """
    return os.path.basename(os.path.normpath(name.strip()))

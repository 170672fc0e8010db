# === ./dropbot/config.py === #
import os
from dotenv import load_dotenv
from datetime import timedelta
from dropbot.utils import parse_duration, log_message

load_dotenv()


def env_interval(name, default):
    """
    Read an interval such as '15s' or '1min' from the environment.
    Falls back to `default` (a timedelta) when the variable is unset or unparsable.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    delta = parse_duration(raw)
    if not delta:
        log_message(f"Ignoring invalid {name}={raw!r}, using {default}", "warning")
        return default
    return delta


def env_int(name, default):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log_message(f"Ignoring invalid {name}={raw!r}, using {default}", "warning")
        return default


RAW_GUILD_IDS = os.getenv("GUILD_IDS", "")
GUILD_IDS = [int(gid.strip()) for gid in RAW_GUILD_IDS.split(",") if gid.strip().isdigit()]
GUILD_MODE = bool(GUILD_IDS)

DISCORD_BOT_TOKEN = os.getenv('DISCORD_BOT_TOKEN')

# Directory the bot draws files from
FILES_DIR = os.getenv('FILES_DIR', './')

# Fastest allowed delay between two drops in one channel
MIN_INTERVAL = env_interval('MIN_INTERVAL', timedelta(minutes=1))

# How often the subscription poller checks for due channels
POLL_INTERVAL = env_interval('POLL_INTERVAL', timedelta(seconds=15))

# 0 means no cap on simultaneous deliveries
MAX_CONCURRENT_DELIVERIES = max(env_int('MAX_CONCURRENT_DELIVERIES', 0), 0)

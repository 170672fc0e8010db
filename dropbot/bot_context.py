"""
Module: dropbot/bot_context.py

Sets up the Discord bot, subscription registry, file dispatcher and poller, and defines
the main slash command group `/drop`.
"""
import nextcord
from nextcord.ext import commands

from dropbot.config import GUILD_IDS, GUILD_MODE, FILES_DIR
from dropbot.delivery import FileDispatcher
from dropbot.scheduler import SubscriptionRegistry, SubscriptionPoller

intents = nextcord.Intents.default()
bot = commands.Bot(intents=intents)

registry = SubscriptionRegistry()
dispatcher = FileDispatcher(bot, FILES_DIR)
poller = SubscriptionPoller(registry, dispatcher)

@bot.slash_command(
    name="drop",
    description="File drop commands",
    guild_ids=GUILD_IDS if GUILD_MODE else None
)
async def drop_group(interaction: nextcord.Interaction):
    """
    Main command group for file drops.
    Subcommands: subscribe, unsubscribe, random, upload, help.
    This command itself is not directly invoked.
    """
    pass

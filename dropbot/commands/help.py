"""
Module: dropbot/commands/help.py

Provides the `/drop help` slash command for displaying usage information
for all file drop commands (subscribe, unsubscribe, random, upload).
"""
import nextcord
from dropbot.utils import log_message, format_interval
from dropbot.bot_context import drop_group, registry, poller

@drop_group.subcommand(name="help", description="Get help with file drop commands")
async def drop_help(
    interaction: nextcord.Interaction,
    command: str = None
):
    """
    Display help information for file drop commands.

    When called without arguments, lists all commands with usage summaries.
    When called with a command name, shows an example and details for it.
    """
    min_interval = format_interval(registry.min_interval)
    help_data = {
        None: {
            "title": "📚 Drop Help",
            "description": "Here are the available file drop commands:",
            "fields": [
                ("/drop subscribe <channel> <interval>", "Drop a random file into a channel on an interval"),
                ("/drop unsubscribe <channel>", "Stop the recurring drop for a channel"),
                ("/drop random", "Drop a random file into this channel now"),
                ("/drop upload <filename>", "Upload a specific file into this channel"),
                ("/drop help [command]", "Get help with file drop commands")
            ]
        },
        "subscribe": {
            "title": "🔁 Subscribe Command Help",
            "description": "Drop a random file into a channel on an interval",
            "example": "/drop subscribe #memes 2h",
            "details": (
                "Parameters:\n"
                "- channel: Target channel for the drops.\n"
                f"- interval: Time between drops (e.g., '30m', '1h', '2d', '1w'), at least {min_interval}.\n\n"
                "The first file arrives one interval after subscribing. Subscribing the same channel "
                "again replaces its interval and restarts the cycle.\n"
                f"Drops are checked every {format_interval(poller.poll_interval)}, so they may arrive slightly late. "
                "Subscriptions are kept in memory and are lost when the bot restarts."
            )
        },
        "unsubscribe": {
            "title": "⏹️ Unsubscribe Command Help",
            "description": "Stop the recurring drop for a channel",
            "example": "/drop unsubscribe #memes",
            "details": "Removes the channel's subscription. Fails if the channel is not subscribed."
        },
        "random": {
            "title": "🎲 Random Command Help",
            "description": "Drop a random file into this channel now",
            "example": "/drop random",
            "details": "Picks one file at random from the bot's files directory."
        },
        "upload": {
            "title": "📎 Upload Command Help",
            "description": "Upload a specific file into this channel",
            "example": "/drop upload cat.png",
            "details": "Only the file name is used; directories in the name are ignored."
        }
    }

    if command and command not in help_data:
        await interaction.response.send_message(f"❌ Unknown command: {command}", ephemeral=True)
        return

    data = help_data[command] if command else help_data[None]
    embed = nextcord.Embed(
        title=data["title"],
        description=data["description"],
        color=nextcord.Color.green()
    )

    if command and "example" in data:
        embed.add_field(name="📝 Example", value=data["example"], inline=False)
        embed.add_field(name="ℹ️ Details", value=data["details"], inline=False)
    else:
        for name, value in data.get("fields", []):
            embed.add_field(name=name, value=value, inline=False)

    log_message(
        f"User {interaction.user.name} ({interaction.user.id}) accessed help: {command or 'general'}",
        "info"
    )
    await interaction.response.send_message(embed=embed, ephemeral=True)

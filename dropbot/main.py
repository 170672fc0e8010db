"""
Module: dropbot/main.py

Entry point for the Drop Discord Bot.
Initializes the bot, registers commands, and defines event handlers
for bot lifecycle, guild membership, disconnection, reconnection, and command logging.
"""
import traceback

import nextcord
from dropbot.config import DISCORD_BOT_TOKEN, GUILD_IDS, GUILD_MODE, FILES_DIR
from dropbot.utils import log_message
from dropbot.bot_context import bot, poller, registry, drop_group

# Import command modules to register slash commands
import dropbot.commands.subscribe
import dropbot.commands.drop
import dropbot.commands.help

@bot.event
async def on_ready():
    """
    Handler for the bot's ready event.

    Logs bot identity, syncs slash commands, and starts the subscription poller.
    """
    log_message(f'Logged in as {bot.user.name} ({bot.user.id})', "info")

    if GUILD_MODE:
        for guild_id in GUILD_IDS:
            guild = bot.get_guild(guild_id)
            guild_name = guild.name if guild else str(guild_id)
            try:
                synced = await bot.sync_application_commands(guild_id=guild_id)
                count = len(synced) if synced is not None else None
                if count is not None:
                    log_message(f"Synced {count} commands to guild {guild_name} ({guild_id})", "info")
                else:
                    log_message(f"Synced commands to guild {guild_name} ({guild_id})", "info")
            except nextcord.errors.Forbidden:
                log_message(
                    f"Failed to sync commands for guild {guild_name} ({guild_id}): Missing Access", "warning"
                )
            except Exception as e:
                log_message(
                    f"Error syncing commands for guild {guild_name} ({guild_id}): {e}", "error"
                )

    # on_ready fires again after reconnects; the poller keeps running across them
    poller.start()
    log_message(f"Serving files from {FILES_DIR}, {len(registry)} active subscription(s)", "info")

@bot.event
async def on_application_command_error(interaction, error):
    """
    Handler for errors during slash command execution.

    Logs the error and notifies the user of an internal failure.
    """
    log_message(f"Slash command error: {error}", "error")
    try:
        await interaction.response.send_message("❌ An internal error occurred.", ephemeral=True)
    except nextcord.HTTPException:
        pass
    except nextcord.InteractionResponded:
        await interaction.followup.send("❌ An internal error occurred.", ephemeral=True)

@bot.event
async def on_error(event_method, *args, **kwargs):
    """
    Catch-all handler for unhandled errors in any event.

    Logs the event method name and full traceback when an error occurs.
    """
    tb = traceback.format_exc()
    log_message(f"Unhandled error in event {event_method}: {tb}", "error")

@bot.event
async def on_guild_join(guild):
    """
    Handler for when the bot joins a new guild.

    Logs the guild information and synchronizes slash commands to the guild.
    """
    log_message(f"Joined new guild: {guild.name} ({guild.id})", "info")
    try:
        synced = await bot.sync_application_commands(guild_id=guild.id)
        log_message(f"Synced {len(synced)} commands to new guild {guild.id}", "info")
    except Exception as e:
        log_message(f"Failed to sync commands for guild {guild.id}: {e}", "error")

@bot.event
async def on_guild_remove(guild):
    """
    Handler for when the bot is removed from a guild.

    Logs the removal event.
    """
    log_message(f"Removed from guild: {guild.name} ({guild.id})", "warning")

@bot.event
async def on_disconnect():
    """
    Handler for bot disconnection. Subscriptions stay registered; drops that come due
    while offline fail and are logged by the poller.
    """
    log_message("Bot disconnected from Discord.", "warning")

@bot.event
async def on_resumed():
    log_message("Bot resumed connection.", "info")

# Log raw `/drop` commands for easy replay
@bot.listen()
async def on_interaction(interaction: nextcord.Interaction):
    """
    Listener for all `/drop` slash command interactions.

    Filters to the `/drop` command group, reconstructs the raw command with
    argument names and values (quoting as needed), and logs it along with
    guild, channel, and user context for easy replay.
    """
    try:
        if interaction.type != nextcord.InteractionType.application_command:
            return
        data = interaction.data
        if data.get('name') != 'drop':
            return
        cmd = f"/{data['name']}"
        for opt in data.get('options', []):
            if opt.get('type') == 1:
                # subcommand
                cmd += f" {opt['name']}"
                for subopt in opt.get('options', []):
                    cmd += f" {subopt['name']}:{_format_option(subopt['value'])}"
            else:
                cmd += f" {opt['name']}:{_format_option(opt['value'])}"
        guild = interaction.guild
        guild_str = f"{guild.name} ({guild.id})" if guild else "DM"
        log_message(
            f"Slash command invoked: {cmd} | Guild: {guild_str} | Channel: {interaction.channel_id} | User: {interaction.user.name} ({interaction.user.id})",
            "info"
        )
    except Exception as e:
        log_message(f"Error in on_interaction: {e}", "error")

def _format_option(val):
    val_str = str(val)
    if isinstance(val, str) and (' ' in val_str or ':' in val_str):
        val_str = f'"{val_str}"'
    return val_str

def main():
    if not DISCORD_BOT_TOKEN:
        raise EnvironmentError("Missing DISCORD_BOT_TOKEN in .env file")
    log_message("Bot is starting up...")
    bot.add_application_command(drop_group)
    bot.run(DISCORD_BOT_TOKEN)

if __name__ == "__main__":
    main()

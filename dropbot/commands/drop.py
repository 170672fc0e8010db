"""
Module: dropbot/commands/drop.py

Defines `/drop random` and `/drop upload` for on-demand file drops into the current channel.
"""
import nextcord
from dropbot.bot_context import dispatcher, drop_group
from dropbot.errors import DeliveryError
from dropbot.utils import log_message

@drop_group.subcommand(name="random", description="Drop a random file into this channel")
async def drop_random(interaction: nextcord.Interaction):
    """
    Handle `/drop random`. Picks one file from the files directory and uploads it here.
    """
    await interaction.response.defer(ephemeral=True)
    try:
        await dispatcher.deliver(interaction.channel.id)
    except DeliveryError as e:
        return await interaction.followup.send(f"❌ {e}")

    log_message(f"User {interaction.user.name} dropped a random file in {interaction.channel.id}", "info")
    await interaction.followup.send("🎲 Dropped.")

@drop_group.subcommand(name="upload", description="Upload a specific file into this channel")
async def drop_upload(
    interaction: nextcord.Interaction,
    filename: str = nextcord.SlashOption(
        description="Name of the file in the files directory", required=True
    )
):
    """
    Handle `/drop upload`. The name is reduced to its last path component before lookup.
    """
    await interaction.response.defer(ephemeral=True)
    try:
        await dispatcher.upload_to(interaction.channel.id, filename)
    except DeliveryError as e:
        return await interaction.followup.send(f"❌ {e}")

    log_message(f"User {interaction.user.name} uploaded {filename!r} in {interaction.channel.id}", "info")
    await interaction.followup.send("📎 Uploaded.")

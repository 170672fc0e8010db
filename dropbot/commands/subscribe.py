"""
Module: dropbot/commands/subscribe.py

Defines `/drop subscribe` and `/drop unsubscribe`, which add or remove a channel's
recurring random file drop.
"""
import nextcord
from dropbot.bot_context import registry, dispatcher, drop_group
from dropbot.errors import DeliveryError, InvalidInterval, NotSubscribed
from dropbot.utils import log_message, parse_duration, format_interval

@drop_group.subcommand(name="subscribe", description="Drop a random file into a channel on an interval")
async def subscribe(
    interaction: nextcord.Interaction,
    channel: nextcord.TextChannel = nextcord.SlashOption(
        description="The channel to drop files into", required=True
    ),
    interval: str = nextcord.SlashOption(
        description="Time between drops (e.g., '30m','1h','2d','1w')", required=True
    )
):
    """
    Handle `/drop subscribe`.

    Validates the interval, checks the bot can post in the channel, then registers
    the subscription. Subscribing an already subscribed channel restarts its cycle
    with the new interval.
    """
    delta = parse_duration(interval)
    if not delta:
        return await interaction.response.send_message("❌ Invalid interval.", ephemeral=True)
    if delta < registry.min_interval:
        return await interaction.response.send_message(
            f"❌ Interval is too short, pick something longer (minimum {format_interval(registry.min_interval)}).",
            ephemeral=True
        )

    await interaction.response.send_message("⌛ Processing...", ephemeral=True)

    try:
        await dispatcher.probe(channel.id)
    except DeliveryError as e:
        log_message(f"Probe of {channel.id} failed: {e}", "warning")
        return await interaction.edit_original_message(content=f"❌ {e}")

    replacing = registry.is_subscribed(channel.id)
    try:
        registry.register(channel.id, delta)
    except InvalidInterval as e:
        return await interaction.edit_original_message(content=f"❌ {e}")

    action = "Re-subscribed" if replacing else "Subscribed"
    log_message(
        f"User {interaction.user.display_name} {action.lower()} #{channel.name} ({channel.id}) every {format_interval(delta)}",
        "info"
    )
    await interaction.edit_original_message(
        content=f"✅ {action}. #{channel.name} gets a file every {format_interval(delta)}."
    )

@drop_group.subcommand(name="unsubscribe", description="Stop dropping files into a channel")
async def unsubscribe(
    interaction: nextcord.Interaction,
    channel: nextcord.TextChannel = nextcord.SlashOption(
        description="The subscribed channel", required=True
    )
):
    """
    Handle `/drop unsubscribe`.
    """
    try:
        registry.unregister(channel.id)
    except NotSubscribed as e:
        return await interaction.response.send_message(f"❌ {e}", ephemeral=True)

    log_message(f"User {interaction.user.name} unsubscribed #{channel.name} ({channel.id})", "info")
    await interaction.response.send_message(f"✅ Unsubscribed #{channel.name}.", ephemeral=True)

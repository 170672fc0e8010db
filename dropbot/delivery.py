"""
Module: dropbot/delivery.py

Provides the Dispatcher protocol consumed by the subscription poller, and FileDispatcher,
which picks files from the configured directory and uploads them to Discord channels.
"""
import asyncio
import os
import random
from typing import Protocol

import nextcord

from dropbot.errors import DeliveryError
from dropbot.utils import log_message, sanitize_filename


class Dispatcher(Protocol):
    """Delivery operation required by the subscription poller."""

    async def deliver(self, channel_id: int) -> None:
        ...


class FileDispatcher:
    """
    Uploads files from a local directory to Discord channels.

    Safe to call concurrently; it keeps no per-delivery state.

    Attributes:
        bot: nextcord Client/Bot used to resolve channels.
        directory (str): Directory files are drawn from.
    """
    def __init__(self, bot, directory, rng=None):
        self.bot = bot
        self.directory = directory
        self.rng = rng or random.Random()

    def list_files(self):
        """
        Return the sorted names of regular files in the directory.

        Raises:
            DeliveryError: If the directory cannot be read.
        """
        try:
            with os.scandir(self.directory) as entries:
                return sorted(e.name for e in entries if e.is_file())
        except OSError as e:
            raise DeliveryError("Failed to read directory") from e

    def pick_random(self):
        files = self.list_files()
        if not files:
            raise DeliveryError("No files to send.")
        return self.rng.choice(files)

    def resolve(self, name):
        """
        Map a user supplied file name to a path inside the directory.

        Raises:
            DeliveryError: If the sanitized name does not point at an existing file.
        """
        clean = sanitize_filename(name)
        path = os.path.join(self.directory, clean)
        if not clean or clean in (".", "..") or not os.path.isfile(path):
            raise DeliveryError("Path not found.")
        return path

    async def get_channel(self, channel_id):
        channel = self.bot.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self.bot.fetch_channel(channel_id)
        except (nextcord.HTTPException, nextcord.InvalidData) as e:
            raise DeliveryError(f"Channel {channel_id} not found.") from e

    async def upload_to(self, channel_id, name):
        """
        Upload the named file to a channel.

        Raises:
            DeliveryError: If the file or channel is missing, or Discord rejects the upload.
        """
        # Filesystem calls stay off the event loop
        path = await asyncio.to_thread(self.resolve, name)
        channel = await self.get_channel(channel_id)
        file = await asyncio.to_thread(nextcord.File, path, filename=os.path.basename(path))
        try:
            await channel.send(file=file)
        except nextcord.HTTPException as e:
            file.close()
            raise DeliveryError("Failed to send message") from e
        log_message(f"Uploaded {os.path.basename(path)} to channel {channel_id}", "debug")

    async def deliver(self, channel_id):
        """
        Upload one randomly chosen file to the channel.
        """
        name = await asyncio.to_thread(self.pick_random)
        await self.upload_to(channel_id, name)

    async def probe(self, channel_id):
        """
        Check that the bot can post in a channel by sending and deleting a test message.

        Raises:
            DeliveryError: If the test message cannot be sent.
        """
        channel = await self.get_channel(channel_id)
        try:
            message = await channel.send("Test.")
        except nextcord.HTTPException as e:
            raise DeliveryError("Failed to send a message") from e
        try:
            await message.delete()
        except nextcord.HTTPException as e:
            log_message(f"Could not delete test message in {channel_id}: {e}", "warning")

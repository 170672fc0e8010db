"""
Module: dropbot/commands

Package initializer for the commands module. Registers slash command handlers via decorators.
"""
# === ./dropbot/commands/__init__.py === #
# No additional code required; commands are registered via decorators in individual files.

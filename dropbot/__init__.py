"""
Package: dropbot

Discord bot that drops files from a local directory into channels, on demand or on a
recurring per-channel interval.
"""

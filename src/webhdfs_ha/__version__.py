"""Version information for webhdfs-ha-py."""

__version__ = "0.1.0"

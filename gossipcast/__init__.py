"""gossipcast: anonymous, ephemeral one-at-a-time message broadcaster."""

__version__ = "0.1.0"

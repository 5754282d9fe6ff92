"""Look up, analyse and convert YouTube videos and playlists, singly or in batch jobs."""

__version__ = "0.1.0"
"""Building blocks for syncing game project trees with files: VFS, middleware, sessions, stats and workspaces."""

__version__ = "0.1.0"
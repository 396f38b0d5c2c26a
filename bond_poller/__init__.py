"""bond-poller — polls the bonds API and publishes a file-based health signal."""

__version__ = "0.1.0"

"""dcsync - devcontainer template catalog synchronizer."""

__version__ = "0.1.0"

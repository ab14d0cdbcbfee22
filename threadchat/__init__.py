"""threadchat - persistent conversations over remote assistant threads."""

__version__ = "1.0.0"

"""Double-entry bookkeeping service: accounts, transfers and journal integrity checks over HTTP."""

__version__ = "0.1.0"
"""Property diary: tenancy reminders and recycle-bin retention."""

__version__ = "1.0.0"

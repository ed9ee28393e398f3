"""RMS client shell: branding cache, branding gate, and auth storage."""

__version__ = "0.1.0"

"""Sequential Schrodinger/Glide job preparation and completion monitoring."""

__version__ = "0.1.0"

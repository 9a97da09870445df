"""AeroVerse orbital lab: injection simulator core and pygame host."""

__version__ = "1.0.0"

"""PlantLens: plant image analysis and PDF reporting service."""

__version__ = "0.1.0"

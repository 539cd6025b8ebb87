"""Real-estate listing registry: properties, owners, images and trace history."""

__version__ = "0.1.0"

"""Statistical-learning toolbox for the red and white Wine Quality tables."""

__version__ = "0.1.0"

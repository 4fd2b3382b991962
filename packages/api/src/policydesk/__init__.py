# This project was developed with assistance from AI tools.
"""PolicyDesk -- insurance brokerage back-office API."""

__version__ = "0.1.0"

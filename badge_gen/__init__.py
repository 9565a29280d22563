"""
Badge photo generator.

Generates synthetic employee badge photos through a text-to-image provider.
"""

__version__ = "1.0.0"

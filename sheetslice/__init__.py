"""
sheetslice
Derives sprite slices and animation frame curves from sprite sheet descriptions
"""

__version__ = "0.1.0"

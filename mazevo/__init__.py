"""
MazEvo - approximating a reference image with evolved mazes of colored paths.
"""

__version__ = "0.1.0"

# src/daytools/__init__.py

"""
Two small command-line tools:

- stats: integers from stdin -> mean / median / mode / SD
- recipes: XML <-> JSON recipe database conversion
"""

__version__ = "0.1.0"

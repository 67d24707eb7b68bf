"""imgst - parallel JPEG metadata cleaner.

Walks an input directory tree, strips embedded metadata from JPEG
files and writes the cleaned copies into an output tree with the
same relative layout.
"""

__version__ = "0.1.0"

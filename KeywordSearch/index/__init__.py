"""
Index lookup module: read access to a prebuilt inverted index.
"""

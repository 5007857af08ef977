"""
Boolean search module: parses AND / OR / NOT queries and evaluates them
by combining per-term relevance sets.
"""

"""
KeywordSearch - boolean keyword search over a prebuilt inverted index
with relevance ranking of the combined results.
"""

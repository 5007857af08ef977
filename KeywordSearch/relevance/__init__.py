"""
Relevance module for combining per-term search results.
Supports union (OR), intersection (AND) and difference (NOT) of scored
document sets and ranking of the combined results.
"""

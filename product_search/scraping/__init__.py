"""
Search-page fetch and extraction pipeline.
"""

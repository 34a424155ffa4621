"""
product_search/api package marker.
"""

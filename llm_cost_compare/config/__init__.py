"""
Configuration loading for price catalogs and engine limits.
"""

"""
Core modules for LLM Cost Compare.

This package contains the price catalog, usage validation, the pricing
engine and the savings and breakeven formulas.
"""

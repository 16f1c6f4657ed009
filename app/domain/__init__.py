"""
Domain layer - book collection models.

Kept free of database and framework concerns.
"""

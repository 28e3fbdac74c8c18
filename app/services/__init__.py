"""Domain operations.

Every function takes the acting user (if any) explicitly and raises an
``app.errors.LearnlyError`` subclass on failure; none of them touch the
request object.
"""

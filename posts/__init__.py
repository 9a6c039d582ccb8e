"""posts/ -- Post records and the post creation flow for Postboard.

Layer rule: posts/ imports from core/ and auth/ (a post references its author).
It does NOT import from api/.
"""

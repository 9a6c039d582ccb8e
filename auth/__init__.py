"""auth/ -- Credentials, tokens, and user accounts for Postboard.

Layer rule: auth/ imports only core/, stdlib, and third-party libraries.
It does NOT import from api/ or posts/.
api/ and posts/ import from auth/, not the other way around.
"""

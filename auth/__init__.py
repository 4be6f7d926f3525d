"""auth/ -- Accounts, password hashing, tokens, and access control for DishDelight.

Layer rule: auth/ imports stdlib, third-party libraries, and core/ only.
It does NOT import from api/ or favorites/.
api/ and favorites/ import from auth/, not the other way around.
"""

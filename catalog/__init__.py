"""catalog/ -- Product catalog and wishlist persistence for the Caprio API.

Layer rule: catalog/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or auth/.
"""

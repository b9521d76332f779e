"""Book Service.

A small FastAPI service that stores book records in a relational database and
exposes batch creation, soft deletion, lookup by id and paginated listing.
"""

__version__ = "0.1.0"

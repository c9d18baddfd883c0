"""Product Ingest - compose product listings and commit them to a catalog.

Validates form input, re-encodes picked images, uploads them to object
storage and commits one product record with an all-or-nothing outcome.
"""

__version__ = "0.1.0"
__author__ = "Product Ingest Team"

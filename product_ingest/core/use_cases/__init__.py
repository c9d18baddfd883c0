# Use Cases Package
"""
Application use cases (business logic).
"""

from product_ingest.core.use_cases.submit_product import SubmitProductUseCase

__all__ = ["SubmitProductUseCase"]

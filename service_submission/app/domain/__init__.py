"""
Domain package: document models and their wire encoding.
"""

from .documents import Description, Document, Product, ProductDocument
from .encoding import build_request_body, canonical_json, encode_product_document, encode_signature

__all__ = [
    "Description",
    "Document",
    "Product",
    "ProductDocument",
    "build_request_body",
    "canonical_json",
    "encode_product_document",
    "encode_signature",
]

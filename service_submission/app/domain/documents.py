"""
Document models for goods introduced into circulation.

Field names on the wire follow the registry's JSON schema; dates are
serialized as ``yyyy-MM-dd``.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Description(_WireModel):
    participant_inn: str = Field(alias="participantInn")


class Product(_WireModel):
    """A single product line of the document."""

    certificate_document: Optional[str] = None
    certificate_document_date: Optional[date] = None
    certificate_document_number: Optional[str] = None
    owner_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[date] = None
    tnved_code: Optional[str] = None
    uit_code: Optional[str] = None
    uitu_code: Optional[str] = None


class ProductDocument(_WireModel):
    """Business payload of a goods introduction document."""

    description: Optional[Description] = None
    doc_id: Optional[str] = None
    doc_status: Optional[str] = None
    doc_type: Optional[str] = None
    import_request: bool = Field(default=False, alias="importRequest")
    owner_inn: Optional[str] = None
    participant_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[date] = None
    production_type: Optional[str] = None
    products: List[Product] = Field(default_factory=list)
    reg_date: Optional[date] = None
    reg_number: Optional[str] = None


class Document(_WireModel):
    """Envelope submitted to the registry.

    ``product_document`` is opaque to the submission pipeline: a
    ``ProductDocument`` or any JSON-compatible mapping.
    """

    document_format: str
    product_document: Union[Dict[str, Any], ProductDocument] = Field(union_mode="left_to_right")
    product_group: str
    signature: str
    type: str

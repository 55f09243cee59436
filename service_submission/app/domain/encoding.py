"""
Wire encoding for registry submissions.
"""

import base64
import json
from typing import Any, Union

from pydantic_core import to_jsonable_python


def canonical_json(payload: Any) -> str:
    """Serialize a payload to compact JSON using wire field names."""
    data = to_jsonable_python(payload, by_alias=True)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def encode_product_document(payload: Any) -> str:
    """Base64 of the canonical JSON form of the business payload."""
    return base64.b64encode(canonical_json(payload).encode("utf-8")).decode("ascii")


def encode_signature(raw: Union[bytes, str]) -> str:
    """Base64-encode a detached signature."""
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def build_request_body(product_document: str, document_format: str, doc_type: str, signature: str) -> bytes:
    """Build the JSON body expected by the document creation endpoint."""
    body = {
        "product_document": product_document,
        "document_format": document_format,
        "type": doc_type,
        "signature": signature,
    }
    return json.dumps(body, ensure_ascii=False).encode("utf-8")

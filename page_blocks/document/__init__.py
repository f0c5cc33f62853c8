from .schema import DocumentBlock, Page
from .parser import deserialize, serialize, serialize_block

__all__ = ["DocumentBlock", "Page", "deserialize", "serialize", "serialize_block"]

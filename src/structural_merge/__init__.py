"""structural-merge: Deep structural merge for Python data.

This library merges one or more source values into a target in place:
nested dicts and lists are combined rather than replaced, later sources take
precedence, writes that would change nothing are skipped, and reference
cycles inside a source are preserved without infinite recursion.

Public API:
    merge: Deep merge sources into a target
    DocumentLayers: Ordered YAML documents merged by precedence
    load_document, write_document, merge_documents, update_document: YAML helpers
    Shape: Structural classification used by the merge
    Boxed: Container returned when the target is a primitive
    MergeError, InvalidTargetError, DocumentError: Exception types

Example:
    ```python
    from structural_merge import merge

    settings = {"server": {"host": "localhost", "port": 8080}, "tags": ["a", "b"]}
    merge(settings, {"server": {"port": 9090}}, {"tags": ["c"]})
    # {"server": {"host": "localhost", "port": 9090}, "tags": ["c", "b"]}
    ```
"""

from .documents import DocumentLayers
from .documents import load_document
from .documents import merge_documents
from .documents import update_document
from .documents import write_document
from .exceptions import DocumentError
from .exceptions import InvalidTargetError
from .exceptions import MergeError
from .merge import merge
from .models import Boxed
from .models import Shape

__version__ = "0.1.0"

__all__ = [
    "merge",
    "DocumentLayers",
    "load_document",
    "write_document",
    "merge_documents",
    "update_document",
    "Shape",
    "Boxed",
    "MergeError",
    "InvalidTargetError",
    "DocumentError",
]

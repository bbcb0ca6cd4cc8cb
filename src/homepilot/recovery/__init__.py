from .interpret import interpret_generated
from .parser import RecoveredDocument, recover_document, repair_json_text, strip_fences

__all__ = [
    "RecoveredDocument",
    "interpret_generated",
    "recover_document",
    "repair_json_text",
    "strip_fences",
]

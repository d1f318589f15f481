"""Persistent stores for runecho artifacts."""

from .ir_store import (
    DEFAULT_IR_PATH,
    IRFormatError,
    deserialize_ir,
    load_ir,
    save_ir,
    serialize_ir,
)

__all__ = [
    "DEFAULT_IR_PATH",
    "IRFormatError",
    "deserialize_ir",
    "load_ir",
    "save_ir",
    "serialize_ir",
]

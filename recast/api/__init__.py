"""Convenience entry points over Mapper and AsyncMapper."""

from __future__ import annotations

from recast.api.functions import (
    copy_into,
    copy_into_async,
    to,
    to_async,
    to_dict,
    to_dict_async,
    with_,
)

__all__ = ["to", "to_async", "copy_into", "copy_into_async", "to_dict", "to_dict_async", "with_"]

"""Descriptor parsing helpers."""

from .descriptor import (
    DEFAULT_VERSION,
    DescriptorParser,
    decode_descriptor,
    encode_descriptor,
    rewrite_descriptor,
)

__all__ = [
    "DEFAULT_VERSION",
    "DescriptorParser",
    "decode_descriptor",
    "encode_descriptor",
    "rewrite_descriptor",
]

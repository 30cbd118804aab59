"""Cryptographic primitives: key derivation, block cipher streaming, secure buffers."""

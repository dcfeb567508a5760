"""Codec, selection and the K-best dynamic-programming table."""

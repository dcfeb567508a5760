"""Alignment records and the top-K aligner."""

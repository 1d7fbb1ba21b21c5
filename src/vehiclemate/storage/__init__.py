"""Storage layer.

This package is the single place where record buckets are read from and
written to durable storage.  Everything above it deals in whole
collections of validated records, never in raw JSON text.
"""

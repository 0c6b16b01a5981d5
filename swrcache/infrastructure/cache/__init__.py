"""Persistent Store Implementation.

Provides the disk-backed, LRU-bounded key-value store that every memo and
SWR cache is built on.
Bounded Context: Cache Management
"""

"""Core Layer: the caching policies and the objects that own them.

Orchestrates key derivation, the memo and stale-while-revalidate
strategies and the registry used for bulk invalidation.
"""

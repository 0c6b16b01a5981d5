"""Domain Layer: contracts, value objects and exceptions for the cache engine.

Nothing in here touches the filesystem or the event loop; the core and
infrastructure layers depend on these definitions, never the other way round.
"""

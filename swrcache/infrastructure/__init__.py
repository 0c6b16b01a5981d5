"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache engine to the outside world (file system, environment,
console) by implementing the interfaces defined in the domain layer.
"""

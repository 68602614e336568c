"""
Persistence adapters and entity repositories.

Storage backends (memory, JSON file, SQL) only know how to read and write
one serialized blob per key. Repositories load whole collections through
``CollectionStore`` and are the only code that mutates them; services and
routers never touch a backend directly.
"""

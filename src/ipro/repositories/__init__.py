from .memory_repo import InMemoryRepository

__all__ = ["InMemoryRepository"]

from todo_index.db.memory import InMemoryTodoIndex

__all__ = [
    "InMemoryTodoIndex",
]

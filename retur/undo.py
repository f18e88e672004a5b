"""
Retur Module - Undo Buffer

Deleted returs are pushed here so the last delete can be undone.

HOW IT WORKS:
1. DELETE /retur/{id}/delete removes the row and pushes its snapshot
2. POST /retur/undo pops the newest snapshot and inserts it again
3. Delete A, delete B, undo, undo → B comes back first, then A

The buffer is in-process memory:
    - lost on restart
    - not shared between worker processes or instances
"""

import threading


class UndoBuffer:
    """
    Thread-safe LIFO stack of deleted snapshots.

    Every method takes the lock, so pop() can check for emptiness and
    remove the top element without another thread slipping in between.
    No size limit.
    """

    def __init__(self):
        self._items = []
        self._lock = threading.Lock()

    def push(self, snapshot):
        with self._lock:
            self._items.append(snapshot)

    def pop(self):
        """
        Remove and return the newest snapshot.

        Returns (snapshot, True), or (None, False) when the buffer is empty.
        """
        with self._lock:
            if not self._items:
                return None, False
            return self._items.pop(), True

    def is_empty(self):
        with self._lock:
            return not self._items

    def clear(self):
        with self._lock:
            self._items.clear()

    def __len__(self):
        with self._lock:
            return len(self._items)


# Process-wide buffer used by the views
deleted_returs = UndoBuffer()

"""
Retur Module - Undo Buffer Tests
"""

import threading

from django.test import SimpleTestCase

from .undo import UndoBuffer


class UndoBufferTests(SimpleTestCase):

    def test_empty_pop(self):
        buffer = UndoBuffer()
        self.assertTrue(buffer.is_empty())
        self.assertEqual(buffer.pop(), (None, False))

    def test_lifo_order(self):
        buffer = UndoBuffer()
        buffer.push('A')
        buffer.push('B')
        self.assertEqual(len(buffer), 2)
        self.assertEqual(buffer.pop(), ('B', True))
        self.assertEqual(buffer.pop(), ('A', True))
        self.assertTrue(buffer.is_empty())

    def test_clear(self):
        buffer = UndoBuffer()
        buffer.push('A')
        buffer.clear()
        self.assertTrue(buffer.is_empty())


class UndoBufferConcurrencyTests(SimpleTestCase):
    """Many threads pushing and popping must not lose or duplicate snapshots."""

    THREADS = 8
    PER_THREAD = 500

    def _push_all(self, buffer, offset):
        for i in range(self.PER_THREAD):
            buffer.push(offset * self.PER_THREAD + i)

    def test_concurrent_pushes(self):
        buffer = UndoBuffer()
        threads = [
            threading.Thread(target=self._push_all, args=(buffer, n))
            for n in range(self.THREADS)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(buffer), self.THREADS * self.PER_THREAD)

    def test_concurrent_push_and_pop(self):
        buffer = UndoBuffer()
        popped = []
        popped_lock = threading.Lock()
        pushers_done = threading.Event()

        def drain():
            while True:
                snapshot, found = buffer.pop()
                if found:
                    with popped_lock:
                        popped.append(snapshot)
                elif pushers_done.is_set():
                    return

        pushers = [
            threading.Thread(target=self._push_all, args=(buffer, n))
            for n in range(self.THREADS)
        ]
        poppers = [threading.Thread(target=drain) for _ in range(self.THREADS)]

        for t in pushers + poppers:
            t.start()
        for t in pushers:
            t.join()
        pushers_done.set()
        for t in poppers:
            t.join()

        expected = set(range(self.THREADS * self.PER_THREAD))
        self.assertEqual(len(popped), len(expected))
        self.assertEqual(set(popped), expected)
        self.assertTrue(buffer.is_empty())

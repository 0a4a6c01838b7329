import unittest
from collections import Counter, deque

import observed
from observed import HandlerRegistry, IllegalStateError, ModificationHandler, ObservedIterator


class RemoveRecorder(ModificationHandler):
    """Records remove hooks and vetoes removal of the elements in `protected`."""

    def __init__(self, protected=()):
        self.calls = []
        self.protected = set(protected)

    def pre_remove(self, obj):
        self.calls.append(("pre_remove", obj))
        return obj not in self.protected

    def post_remove(self, obj, result):
        self.calls.append(("post_remove", obj, result))


class TestObservedIterator(unittest.TestCase):
    """Unit tests for removal through the ObservedIterator."""

    def setUp(self):
        self.registry = HandlerRegistry()

    def test_iter_returns_observed_iterator(self):
        numbers = observed.wrap([1, 2, 3], registry=self.registry)

        it = iter(numbers)

        self.assertIsInstance(it, ObservedIterator)
        self.assertIs(it.observed, numbers)
        self.assertIsInstance(numbers.iterator(), ObservedIterator)
        self.assertEqual(list(it), [1, 2, 3])

    def test_next_remembers_last_element(self):
        numbers = observed.wrap([10, 20], registry=self.registry)
        it = iter(numbers)

        self.assertEqual(next(it), 10)
        self.assertEqual(it.last, 10)
        self.assertEqual(next(it), 20)
        self.assertEqual(it.last, 20)
        with self.assertRaises(StopIteration):
            next(it)

    def test_remove_goes_through_handler(self):
        handler = RemoveRecorder()
        numbers = observed.wrap([1, 2, 3, 4], handler, registry=self.registry)

        it = iter(numbers)
        for element in it:
            if element % 2 == 0:
                self.assertTrue(it.remove())

        self.assertEqual(numbers.collection, [1, 3])
        self.assertEqual(handler.calls, [
            ("pre_remove", 2), ("post_remove", 2, True),
            ("pre_remove", 4), ("post_remove", 4, True),
        ])

    def test_vetoed_remove_keeps_element(self):
        handler = RemoveRecorder(protected={2})
        numbers = observed.wrap([1, 2, 3], handler, registry=self.registry)

        it = iter(numbers)
        next(it)
        next(it)
        self.assertFalse(it.remove())

        self.assertEqual(numbers.collection, [1, 2, 3])
        self.assertEqual(handler.calls, [("pre_remove", 2)])
        # Iteration carries on from where it was.
        self.assertEqual(next(it), 3)

    def test_remove_parity_with_direct_remove(self):
        via_iterator = RemoveRecorder(protected={3})
        direct = RemoveRecorder(protected={3})
        first = observed.wrap({1, 2, 3}, via_iterator, registry=self.registry)
        second = observed.wrap({1, 2, 3}, direct, registry=self.registry)

        it = iter(first)
        for element in it:
            if element in (2, 3):
                it.remove()
        second.remove(2)
        second.remove(3)

        self.assertEqual(first.collection, second.collection)
        self.assertEqual(sorted(via_iterator.calls), sorted(direct.calls))

    def test_remove_before_next_raises(self):
        numbers = observed.wrap([1], registry=self.registry)
        it = iter(numbers)

        with self.assertRaises(IllegalStateError):
            it.remove()
        self.assertEqual(numbers.collection, [1])

    def test_remove_twice_raises(self):
        handler = RemoveRecorder()
        numbers = observed.wrap(deque([1, 2]), handler, registry=self.registry)
        it = iter(numbers)
        next(it)
        it.remove()

        with self.assertRaises(IllegalStateError):
            it.remove()

        self.assertEqual(list(numbers.collection), [2])
        self.assertEqual(handler.calls.count(("post_remove", 1, True)), 1)

    def test_remove_after_direct_removal_raises(self):
        for container in ({1, 2}, Counter({1: 1, 2: 1})):
            with self.subTest(container=container):
                handler = RemoveRecorder()
                items = observed.wrap(container, handler, registry=self.registry)
                it = iter(items)
                element = next(it)
                self.assertTrue(items.remove(element))

                with self.assertRaises(IllegalStateError):
                    it.remove()

                # Only the direct removal was reported as done.
                self.assertEqual(handler.calls, [
                    ("pre_remove", element), ("post_remove", element, True),
                    ("pre_remove", element),
                ])
                self.assertEqual(len(items), 1)

    def test_bag_iterator_removes_one_copy(self):
        handler = RemoveRecorder()
        bag = Counter({"a": 2, "b": 1})
        items = observed.wrap(bag, handler, registry=self.registry)

        it = iter(items)
        for element in it:
            if element == "a":
                it.remove()
                break

        self.assertEqual(bag, Counter({"a": 1, "b": 1}))
        self.assertEqual(len(items), 2)
        self.assertEqual(handler.calls, [("pre_remove", "a"), ("post_remove", "a", True)])


if __name__ == '__main__':
    unittest.main()

import unittest
from unittest.mock import MagicMock

import observed
from observed import (
    HandlerConfig,
    HandlerRegistry,
    ModificationListener,
    ModificationType,
    ModificationVetoedError,
    PostModificationEvent,
    PreModificationEvent,
    StandardHandler,
)


class NoNegatives(ModificationListener):
    """Vetoes adding negative numbers and records everything it hears."""

    def __init__(self):
        self.pre_events = []
        self.post_events = []

    def modifying(self, event):
        self.pre_events.append(event)
        if event.type is ModificationType.ADD and event.obj < 0:
            raise ModificationVetoedError(event, "negative values are not allowed")

    def modified(self, event):
        self.post_events.append(event)


class TestStandardHandler(unittest.TestCase):
    """Unit tests for listener fan-out and vetoing in StandardHandler."""

    def setUp(self):
        self.registry = HandlerRegistry()
        observed.set_handler_config(None)

    def tearDown(self):
        observed.set_handler_config(None)

    def test_no_listeners_allows_everything(self):
        numbers = observed.wrap([1], registry=self.registry)

        self.assertTrue(numbers.add(2))
        self.assertTrue(numbers.remove(1))
        numbers.clear()

        self.assertEqual(numbers.collection, [])

    def test_listener_veto_stops_modification(self):
        listener = NoNegatives()
        numbers = observed.wrap([], listener, registry=self.registry)

        self.assertFalse(numbers.add(-1))
        self.assertTrue(numbers.add(1))

        self.assertEqual(numbers.collection, [1])
        self.assertEqual(len(listener.pre_events), 2)
        self.assertEqual(len(listener.post_events), 1)
        self.assertEqual(listener.post_events[0].obj, 1)

    def test_veto_is_logged_at_debug(self):
        numbers = observed.wrap([], NoNegatives(), registry=self.registry)

        with self.assertLogs("observed", level="DEBUG") as cm:
            numbers.add(-5)

        self.assertTrue(any("vetoed" in line for line in cm.output))

    def test_event_contents(self):
        listener = NoNegatives()
        numbers = observed.wrap([1, 2], listener, registry=self.registry)
        batch = [3, 4, 5]

        numbers.add_all(batch)

        pre = listener.pre_events[0]
        post = listener.post_events[0]
        self.assertIsInstance(pre, PreModificationEvent)
        self.assertIsInstance(post, PostModificationEvent)
        self.assertIs(pre.type, ModificationType.ADD_ALL)
        self.assertIs(pre.obj, batch)
        self.assertIs(pre.observed, numbers)
        self.assertIs(pre.handler, numbers.handler)
        self.assertEqual(pre.pre_size, 2)
        self.assertIs(post.obj, batch)
        self.assertEqual(post.pre_size, 2)
        self.assertEqual(post.post_size, 5)
        self.assertEqual(post.size_change, 3)
        self.assertTrue(post.result)

    def test_clear_event_has_no_result(self):
        events = []
        numbers = observed.wrap({1, 2}, events.append, registry=self.registry)

        numbers.clear()

        self.assertIs(events[0].type, ModificationType.CLEAR)
        self.assertIsNone(events[0].obj)
        self.assertIsNone(events[0].result)
        self.assertEqual(events[0].size_change, -2)

    def test_mask_filters_listeners(self):
        added = []
        removed = []
        handler = StandardHandler()
        numbers = observed.wrap([], handler, registry=self.registry)
        handler.add_post_listener(added.append, ModificationType.ADD | ModificationType.ADD_ALL)
        handler.add_post_listener(removed.append, ModificationType.REMOVE)

        numbers.add(1)
        numbers.add_all([2, 3])
        numbers.remove(2)
        numbers.clear()

        self.assertEqual([e.type for e in added], [ModificationType.ADD, ModificationType.ADD_ALL])
        self.assertEqual([e.obj for e in removed], [2])

    def test_callable_pre_listener_can_veto(self):
        def no_clear(event):
            raise ModificationVetoedError(event)

        handler = StandardHandler()
        handler.add_pre_listener(no_clear, ModificationType.CLEAR)
        numbers = observed.wrap([1, 2], handler, registry=self.registry)

        numbers.clear()
        self.assertTrue(numbers.add(3))

        self.assertEqual(numbers.collection, [1, 2, 3])

    def test_iterator_removal_reports_remove_events(self):
        listener = NoNegatives()
        numbers = observed.wrap([1, 2], listener, registry=self.registry)

        it = iter(numbers)
        next(it)
        it.remove()

        self.assertIs(listener.post_events[0].type, ModificationType.REMOVE)
        self.assertEqual(listener.post_events[0].obj, 1)
        self.assertTrue(listener.post_events[0].result)
        self.assertEqual(listener.post_events[0].post_size, 1)

    def test_remove_listeners(self):
        callback = MagicMock()
        handler = StandardHandler()
        handler.add_pre_listener(callback)
        handler.add_post_listener(callback)

        handler.remove_pre_listener(callback)
        self.assertEqual(handler.pre_listeners, [])
        self.assertEqual(handler.post_listeners, [callback])

        handler.remove_post_listener(callback)
        handler.remove_post_listener(callback)  # Removing twice is harmless.
        self.assertEqual(handler.post_listeners, [])

    def test_add_listener_rejects_unusable_values(self):
        handler = StandardHandler()

        with self.assertRaises(TypeError):
            handler.add_listener(42)
        with self.assertRaises(TypeError):
            handler.add_pre_listener("nope")
        with self.assertRaises(TypeError):
            handler.add_post_listener(None)

    def test_listener_errors_propagate_by_default(self):
        def broken(event):
            raise KeyError("boom")

        numbers = observed.wrap([], broken, registry=self.registry)

        with self.assertRaises(KeyError):
            numbers.add(1)
        # The post-listener ran after the change, which stays committed.
        self.assertEqual(numbers.collection, [1])

    def test_suppressed_listener_errors_are_logged(self):
        def broken(event):
            raise KeyError("boom")

        events = []
        handler = StandardHandler(config=HandlerConfig(suppress_listener_errors=True))
        handler.add_post_listener(broken)
        handler.add_post_listener(events.append)
        numbers = observed.wrap([], handler, registry=self.registry)

        with self.assertLogs("observed", level="ERROR") as cm:
            self.assertTrue(numbers.add(1))

        self.assertEqual(len(events), 1)
        self.assertTrue(any("post-modification listener" in line for line in cm.output))

    def test_global_config_applies_to_new_handlers(self):
        config = HandlerConfig(suppress_listener_errors=True, log_vetoes=False)
        observed.set_handler_config(config)

        self.assertIs(observed.get_handler_config(), config)
        self.assertIs(StandardHandler().config, config)
        self.assertIs(observed.wrap([], registry=self.registry).handler.config, config)

        observed.set_handler_config(None)
        self.assertEqual(StandardHandler().config, HandlerConfig())

    def test_set_handler_config_rejects_other_types(self):
        with self.assertRaises(TypeError):
            observed.set_handler_config({"suppress_listener_errors": True})


if __name__ == '__main__':
    unittest.main()

from __future__ import annotations

import importlib.util
import unittest

JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is not installed")
class CapturePromiseTests(unittest.TestCase):
    def test_capture_follows_relays_to_the_writing_scope(self) -> None:
        from lazyeval_jax import Promise, Scope, capture, evaluate, parse

        writer = Scope({"x": 31}, label="writer")
        written = Promise(parse("x > 30"), writer)
        relay = written.forward("cond", Scope({"x": 0}, label="relay"))
        final = relay.forward("cond", Scope({"x": 30}, label="final"))

        captured = capture(final)
        self.assertIs(captured.scope, writer)
        self.assertEqual(captured.expression, parse("x > 30"))
        self.assertIs(evaluate(captured), True)

    def test_capture_without_following_sees_only_the_relay_name(self) -> None:
        from lazyeval_jax import Promise, Scope, Symbol, capture, parse

        writer = Scope({"x": 31})
        relay_scope = Scope({"x": 0})
        relay = Promise(parse("x > 30"), writer).forward("cond", relay_scope)

        naive = capture(relay, follow_forwards=False)
        self.assertEqual(naive.expression, Symbol("cond"))
        self.assertIs(naive.scope, relay_scope)

    def test_capture_through_python_relay_functions(self) -> None:
        from lazyeval_jax import capture, evaluate, promise

        def inner(cond):
            x = 30
            return x, evaluate(capture(cond))

        def relay(cond):
            x = 0
            return x, inner(cond.forward("cond"))

        x = 31
        self.assertEqual(x, 31)
        _, (_, result) = relay(promise("x > 30"))
        self.assertIs(result, True)

    def test_forced_binding_captures_as_literal_in_root(self) -> None:
        from lazyeval_jax import ROOT_SCOPE, Literal, Scope, capture, evaluate, promise

        binding = promise("a + 1", Scope({"a": 41}))
        self.assertFalse(binding.is_forced)
        self.assertEqual(binding.force(), 42)
        self.assertTrue(binding.is_forced)

        captured = capture(binding)
        self.assertIs(captured.scope, ROOT_SCOPE)
        self.assertEqual(captured.expression, Literal(42))
        self.assertEqual(evaluate(captured), 42)

    def test_eager_value_round_trips_identically(self) -> None:
        import jax.numpy as jnp

        from lazyeval_jax import Promise, capture, evaluate

        column = jnp.asarray([1.0, 2.0, 3.0])
        captured = capture(Promise.of_value(column))
        self.assertIs(evaluate(captured), column)

    def test_forcing_a_relay_forces_the_original(self) -> None:
        from lazyeval_jax import Promise, Scope, parse

        written = Promise(parse("x * 2"), Scope({"x": 5}))
        relay = written.forward("arg", Scope({"x": 100}))

        self.assertEqual(relay.force(), 10)
        self.assertTrue(written.is_forced)
        self.assertEqual(written.value, 10)

    def test_forward_chain_cannot_be_rewired(self) -> None:
        import dataclasses

        from lazyeval_jax import Scope, capture, promise

        written = promise("x + 1", Scope({"x": 1}))
        relay = written.forward("arg", Scope({}))

        with self.assertRaises(dataclasses.FrozenInstanceError):
            relay.forwarded_from = relay  # type: ignore[misc]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            relay.scope = Scope({"x": 5})  # type: ignore[misc]

        self.assertIs(capture(relay).scope, written.scope)
        self.assertEqual(relay.force(), 2)
        self.assertTrue(relay.is_forced)

    def test_unforced_value_access_raises(self) -> None:
        from lazyeval_jax import promise

        with self.assertRaises(ValueError):
            promise("1").value

    def test_capture_rejects_non_promises(self) -> None:
        from lazyeval_jax import capture, lazy

        with self.assertRaises(TypeError):
            capture(lazy("x"))  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            capture("x")  # type: ignore[arg-type]

    def test_lazy_captures_the_calling_frame(self) -> None:
        from lazyeval_jax import evaluate, lazy

        y = 5
        value = lazy("y * 2")
        y = 6
        self.assertEqual(y, 6)
        self.assertEqual(evaluate(value), 10)
        self.assertIn("y", value.scope)

    def test_capture_dots_names_positional_bindings_by_expression(self) -> None:
        from lazyeval_jax import Scope, capture_dots, promise

        scope = Scope({"x": 1, "y": 2})
        captured = capture_dots(promise("x + 1", scope), total=promise("y", scope))

        self.assertEqual(list(captured), ["x + 1", "total"])
        self.assertTrue(all(item.scope is scope for item in captured.values()))

    def test_common_scope(self) -> None:
        from lazyeval_jax import ROOT_SCOPE, Scope, common_scope, lazy

        shared = Scope({"a": 1})
        other = Scope({"a": 1})

        self.assertIs(common_scope([lazy("a", shared), lazy("a + 1", shared)]), shared)
        self.assertIs(common_scope({"p": lazy("a", shared), "q": lazy("a", other)}), ROOT_SCOPE)
        self.assertIs(common_scope([]), ROOT_SCOPE)

    def test_lazy_value_equality_is_structural_on_expression_and_identity_on_scope(self) -> None:
        from lazyeval_jax import Scope, lazy

        scope = Scope({"a": 1})
        self.assertEqual(lazy("a + 1", scope), lazy("a+1", scope))
        self.assertNotEqual(lazy("a + 1", scope), lazy("a + 1", Scope({"a": 1})))
        self.assertEqual(hash(lazy("a + 1", scope)), hash(lazy("a + 1", scope)))

    def test_lazy_value_rejects_non_expressions(self) -> None:
        from lazyeval_jax import LazyValue, Scope, Symbol

        with self.assertRaises(TypeError):
            LazyValue("x + 1")  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            LazyValue(Symbol("x"), {"x": 1})  # type: ignore[arg-type]
        self.assertIsInstance(LazyValue(Symbol("x"), Scope()), LazyValue)


if __name__ == "__main__":
    unittest.main()

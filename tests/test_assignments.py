import unittest

from margsum.core import errors
from margsum.core.modeling import assignments, diffs, variables


class EqualVariable(variables.Variable):
    """Every instance compares equal, so only identity can tell them apart."""

    def __eq__(self, other):
        return isinstance(other, EqualVariable)

    def __hash__(self):
        return 0


class TestFixedArityAssignments(unittest.TestCase):

    def setUp(self) -> None:
        domain = variables.DiscreteDomain.of_size(3)
        self.x = variables.DiscreteVariable(domain, 0, name="x")
        self.y = variables.DiscreteVariable(domain, 1, name="y")
        self.z = variables.DiscreteVariable(domain, 2, name="z")
        self.w = variables.Variable("live", name="w")
        self.outside = variables.Variable(42, name="outside")
        self.all_assignments = [
            assignments.Assignment1(self.x, 2),
            assignments.Assignment2(self.x, 2, self.y, 0),
            assignments.Assignment3(self.x, 2, self.y, 0, self.z, 1),
            assignments.Assignment4(self.x, 2, self.y, 0, self.z, 1, self.w, "bound"),
        ]

    def test_fallback_to_live_value(self):
        for a in self.all_assignments:
            self.assertEqual(a.apply(self.outside), 42)
            self.assertEqual(a[self.outside], 42)
            self.outside.set(43)
            self.assertEqual(a.apply(self.outside), 43)
            self.outside.set(42)

    def test_get_agrees_with_contains(self):
        missing = object()
        unset = variables.Variable(name="unset")
        hash_map = assignments.HashMapAssignment([self.x, unset])
        stack = assignments.AssignmentStack.of(assignments.Assignment1(self.y, 0), hash_map)
        for a in self.all_assignments + [hash_map, stack]:
            for v in [self.x, self.y, self.z, self.w, self.outside, unset]:
                self.assertEqual(a.get(v, missing) is not missing, a.contains(v))
                if a.contains(v):
                    self.assertEqual(a.get(v), a.apply(v))
                    self.assertIn(v, a)

    def test_variables_in_order(self):
        self.assertEqual(self.all_assignments[3].variables(), (self.x, self.y, self.z, self.w))
        self.assertEqual(self.all_assignments[0].variables(), (self.x,))

    def test_bound_values(self):
        a = self.all_assignments[3]
        self.assertEqual(a.apply(self.x), 2)
        self.assertEqual(a.apply(self.y), 0)
        self.assertEqual(a.apply(self.z), 1)
        self.assertEqual(a.apply(self.w), "bound")

    def test_identity_not_equality(self):
        a = EqualVariable(1)
        b = EqualVariable(2)
        self.assertEqual(a, b)
        assignment = assignments.Assignment1(a, 10)
        self.assertEqual(assignment.apply(a), 10)
        self.assertEqual(assignment.apply(b), 2)
        self.assertFalse(assignment.contains(b))
        self.assertIsNone(assignment.get(b))

    def test_update(self):
        a = self.all_assignments[1]
        a.update(self.y, 2)
        self.assertEqual(a.apply(self.y), 2)
        a[self.x] = 0
        self.assertEqual(a.apply(self.x), 0)
        with self.assertRaises(errors.UnsupportedOperation):
            a.update(self.z, 1)

    def test_globalize(self):
        self.all_assignments[3].globalize()
        self.assertEqual(self.x.value, 2)
        self.assertEqual(self.y.value, 0)
        self.assertEqual(self.z.value, 1)
        self.assertEqual(self.w.value, "bound")

    def test_globalize_records_and_undoes(self):
        diff = diffs.DiffList()
        self.all_assignments[2].globalize(diff)
        self.assertEqual(len(diff), 3)
        self.assertEqual((self.x.value, self.y.value, self.z.value), (2, 0, 1))
        diff.undo()
        self.assertEqual((self.x.value, self.y.value, self.z.value), (0, 1, 2))
        diff.redo()
        self.assertEqual((self.x.value, self.y.value, self.z.value), (2, 0, 1))

    def test_set_to_maximize_globalizes(self):
        self.all_assignments[0].set_to_maximize()
        self.assertEqual(self.x.value, 2)

    def test_globalize_constant_variable(self):
        constant = variables.ConstantVariable(5)
        with self.assertRaises(errors.UnsetVariableClass):
            assignments.Assignment1(constant, 6).globalize()
        self.assertEqual(constant.value, 5)

    def test_failed_globalize_leaves_live_values(self):
        constant = variables.ConstantVariable(5)
        diff = diffs.DiffList()
        with self.assertRaises(errors.UnsetVariableClass):
            assignments.Assignment2(self.x, 1, constant, 6).globalize(diff)
        self.assertEqual((self.x.value, constant.value), (0, 5))
        self.assertEqual(len(diff), 0)

    def test_globalize_logs_count(self):
        with self.assertLogs(level="DEBUG") as logs:
            self.all_assignments[2].globalize()
        self.assertIn("globalizing 3 variables", "\n".join(logs.output))

    def test_fixed_arity_assignment(self):
        a = assignments.fixed_arity_assignment([self.x, self.y, self.z], [1, 1, 1])
        self.assertIsInstance(a, assignments.Assignment3)
        self.assertEqual(a.apply(self.z), 1)
        with self.assertRaises(errors.ArityExceeded):
            assignments.fixed_arity_assignment([self.x, self.y, self.z, self.w, self.outside], [0, 0, 0, 0, 0])
        with self.assertRaises(ValueError):
            assignments.fixed_arity_assignment([self.x, self.y], [1])


class TestDiscreteAssignment1(unittest.TestCase):

    def setUp(self) -> None:
        self.domain = variables.DiscreteDomain(["a", "b", "c"])
        self.x = variables.DiscreteVariable(self.domain, "a")

    def test_stores_code(self):
        a = assignments.DiscreteAssignment1.from_value(self.x, "c")
        self.assertEqual(a.int_value1, 2)
        self.assertEqual(a.apply(self.x), "c")
        a.int_value1 = 1
        self.assertEqual(a.value1, "b")
        a.update(self.x, "a")
        self.assertEqual(a.int_value1, 0)
        with self.assertRaises(errors.UnsupportedOperation):
            a.update(variables.DiscreteVariable(self.domain), "a")

    def test_globalize(self):
        diff = diffs.DiffList()
        assignments.DiscreteAssignment1(self.x, 1).globalize(diff)
        self.assertEqual(self.x.value, "b")
        diff.undo()
        self.assertEqual(self.x.value, "a")


class TestHashMapAssignment(unittest.TestCase):

    def setUp(self) -> None:
        self.x = variables.Variable(1.5)
        self.y = variables.DiscreteVariable(variables.DiscreteDomain.of_size(4), 3)
        self.z = variables.Variable("z")

    def test_seeded_from_live_values(self):
        a = assignments.HashMapAssignment([self.x, self.y])
        self.x.set(2.5)
        self.assertEqual(a.apply(self.x), 1.5)
        self.assertEqual(a.apply(self.y), 3)
        self.assertEqual(a.variables(), [self.x, self.y])

    def test_unbound_variable(self):
        a = assignments.HashMapAssignment([self.x])
        self.assertFalse(a.contains(self.z))
        self.assertIsNone(a.get(self.z))
        self.assertEqual(a.get(self.z, "default"), "default")
        with self.assertRaises(errors.VariableNotBound):
            a.apply(self.z)
        with self.assertRaises(KeyError):
            a[self.z]

    def test_update(self):
        a = assignments.HashMapAssignment()
        a.update(self.z, "first")
        a[self.z] = "second"
        self.assertEqual(a.apply(self.z), "second")
        self.assertEqual(len(a), 1)
        a.globalize()
        self.assertEqual(self.z.value, "second")


class TestVirtualAssignments(unittest.TestCase):

    def setUp(self) -> None:
        domain = variables.DiscreteDomain.of_size(3)
        self.labeled = variables.LabeledDiscreteVariable(domain, 0, target=2)
        self.plain = variables.Variable("plain")

    def test_global_assignment(self):
        g = assignments.GlobalAssignment()
        self.assertEqual(g.apply(self.plain), "plain")
        self.assertEqual(g.get(self.labeled), 0)
        self.assertTrue(g.contains(self.plain))
        g.globalize()
        self.assertEqual(self.labeled.value, 0)
        with self.assertRaises(errors.UnsupportedOperation):
            g.variables()

    def test_global_assignment_reads_live_state(self):
        g = assignments.GlobalAssignment()
        self.plain.set("changed")
        self.assertEqual(g.apply(self.plain), "changed")

    def test_target_assignment(self):
        t = assignments.TargetAssignment()
        self.assertEqual(t.apply(self.labeled), 2)
        self.assertEqual(self.labeled.value, 0)
        self.assertEqual(t.apply(self.plain), "plain")
        self.assertTrue(t.contains(self.plain))
        with self.assertRaises(errors.UnsupportedOperation):
            t.globalize()
        with self.assertRaises(errors.UnsupportedOperation):
            t.variables()
        self.assertEqual(self.labeled.value, 0)
        self.labeled.set_to_target()
        self.assertTrue(self.labeled.is_correct)


class TestAssignmentStack(unittest.TestCase):

    def setUp(self) -> None:
        self.v = variables.Variable("live v")
        self.u = variables.Variable("live u")
        self.outside = variables.Variable("live outside")

    def test_innermost_wins(self):
        inner = assignments.Assignment1(self.v, "inner")
        outer = assignments.Assignment2(self.v, "outer", self.u, "outer u")
        stack = assignments.AssignmentStack.of(inner, outer)
        self.assertEqual(stack.apply(self.v), "inner")
        self.assertEqual(stack.apply(self.u), "outer u")
        self.assertEqual(stack.get(self.v), "inner")
        self.assertTrue(stack.contains(self.u))
        self.assertEqual(stack.variables(), [self.v, self.u])

    def test_falls_back_to_last_layer(self):
        stack = assignments.AssignmentStack.of(assignments.Assignment1(self.v, "override"), assignments.GlobalAssignment())
        self.assertEqual(stack.apply(self.v), "override")
        self.assertEqual(stack.apply(self.outside), "live outside")
        self.assertTrue(stack.contains(self.outside))

    def test_map_backed_last_layer(self):
        stack = assignments.AssignmentStack.of(assignments.Assignment1(self.v, "override"), assignments.HashMapAssignment([self.u]))
        self.assertIsNone(stack.get(self.outside))
        self.assertFalse(stack.contains(self.outside))
        with self.assertRaises(errors.VariableNotBound):
            stack.apply(self.outside)

    def test_prepend_shares_tail(self):
        base = assignments.AssignmentStack(assignments.Assignment1(self.v, "base"))
        pushed = base.prepend(assignments.Assignment1(self.v, "pushed"))
        self.assertIs(pushed.next, base)
        self.assertEqual(pushed.apply(self.v), "pushed")
        self.assertEqual(base.apply(self.v), "base")

    def test_deep_stack(self):
        stack = assignments.AssignmentStack(assignments.Assignment1(self.v, 0))
        for i in range(1, 5000):
            stack = stack.prepend(assignments.Assignment1(self.u, i))
        self.assertEqual(stack.apply(self.v), 0)
        self.assertEqual(stack.apply(self.u), 4999)

    def test_globalize(self):
        stack = assignments.AssignmentStack.of(assignments.Assignment1(self.v, "new v"), assignments.Assignment2(self.v, "old v", self.u, "new u"))
        stack.globalize()
        self.assertEqual(self.v.value, "new v")
        self.assertEqual(self.u.value, "new u")

    def test_empty(self):
        with self.assertRaises(ValueError):
            assignments.AssignmentStack.of()


if __name__ == "__main__":
    unittest.main()

"""Tests for executor module."""

import unittest

from bounce.context import BuildContext
from bounce.errors import ConfigurationError, CycleError, TaskExecutionError
from bounce.executor import Command, Executor
from bounce.scope import ScopeRecorder
from bounce.task import Task
from helpers.logging import logger_stub
from helpers.tasks import RecordingTask


class TestCommand(unittest.TestCase):
    def test_parse(self):
        self.assertIs(Command.parse("build"), Command.BUILD)
        self.assertIs(Command.parse("clean"), Command.CLEAN)

    def test_parse_unknown(self):
        """Test that an unknown command name is a configuration error."""
        with self.assertRaises(ConfigurationError) as cm:
            Command.parse("deploy")
        self.assertIn("no such command deploy", str(cm.exception))

    def test_str(self):
        self.assertEqual(str(Command.BUILD), "build")


class ExecutorTestCase(unittest.TestCase):
    def setUp(self):
        self.log = []
        self.recorder = ScopeRecorder()
        self.context = BuildContext(logger_stub, self.recorder)
        self.executor = Executor(self.context)

    def task(self, name, *deps, **kwargs):
        return RecordingTask(name, self.log, deps, **kwargs)


class TestExecutionOrder(ExecutorTestCase):
    def test_single_task(self):
        root = self.task("root")

        self.executor.execute(Command.BUILD, [root])

        self.assertEqual(self.log, [("build", "root")])

    def test_linear_dependencies(self):
        """Test that dependencies build before their dependents."""
        lint = self.task("lint")
        build = self.task("build", lint)
        test = self.task("test", build)

        self.executor.execute(Command.BUILD, [test])

        self.assertEqual(
            self.log, [("build", "lint"), ("build", "build"), ("build", "test")]
        )

    def test_shared_dependency_runs_once_before_both_dependents(self):
        """Test Root -> {Dep1, Dep2}, Dep2 -> {Dep1}: Dep1 once, then Dep2, then Root."""
        dep1 = self.task("dep1")
        dep2 = self.task("dep2", dep1)
        root = self.task("root", dep1, dep2)

        self.executor.execute(Command.BUILD, [root])

        self.assertEqual(
            self.log, [("build", "dep1"), ("build", "dep2"), ("build", "root")]
        )

    def test_diamond_dependencies(self):
        """Test that a diamond executes every task exactly once, dependencies first."""
        a = self.task("a")
        b = self.task("b", a)
        c = self.task("c", a)
        d = self.task("d", b, c)

        self.executor.execute(Command.BUILD, [d])

        order = [name for _, name in self.log]
        self.assertEqual(sorted(order), ["a", "b", "c", "d"])
        self.assertLess(order.index("a"), order.index("b"))
        self.assertLess(order.index("a"), order.index("c"))
        self.assertLess(order.index("b"), order.index("d"))
        self.assertLess(order.index("c"), order.index("d"))

    def test_same_dependency_listed_twice(self):
        """Test that a task referenced by two members of one task runs once."""
        shared = self.task("shared")
        root = self.task("root", shared, shared)

        self.executor.execute(Command.BUILD, [root])

        self.assertEqual(self.log, [("build", "shared"), ("build", "root")])

    def test_multiple_roots_share_memo(self):
        """Test that tasks shared between roots run once per executor."""
        shared = self.task("shared")
        first = self.task("first", shared)
        second = self.task("second", shared)

        self.executor.execute(Command.BUILD, [first, second])
        self.executor.build(first)

        self.assertEqual(
            self.log, [("build", "shared"), ("build", "first"), ("build", "second")]
        )

    def test_equal_looking_tasks_both_run(self):
        """Test that de-duplication is by identity, not by value."""

        class Same(Task):
            def __init__(self, log):
                self.log = log

            def __eq__(self, other):
                return isinstance(other, Same)

            def __hash__(self):
                return 0

            def build(self, context):
                self.log.append("built")

        root = self.task("root", Same(self.log), Same(self.log))

        self.executor.build(root)

        self.assertEqual(self.log.count("built"), 2)

    def test_build_and_clean_tracked_separately(self):
        """Test that build and clean keep independent memo sets."""
        dep = self.task("dep")
        root = self.task("root", dep)

        self.executor.build(root)
        self.executor.clean(root)
        self.executor.build(root)

        self.assertEqual(
            self.log,
            [("build", "dep"), ("build", "root"), ("clean", "dep"), ("clean", "root")],
        )

    def test_executed_in_completion_order(self):
        dep = self.task("dep")
        root = self.task("root", dep)

        self.executor.build(root)

        self.assertEqual(self.executor.executed(Command.BUILD), [dep, root])
        self.assertEqual(self.executor.executed(Command.CLEAN), [])

    def test_context_passed_to_actions(self):
        seen = []

        class Probe(Task):
            def build(self, context):
                seen.append(context)

        self.executor.build(Probe())

        self.assertEqual(seen, [self.context])


class TestCycles(ExecutorTestCase):
    def test_two_task_cycle(self):
        """Test A -> B -> A is detected before either task runs."""
        a = self.task("a")
        b = self.task("b", a)
        a.deps = [b]

        with self.assertRaises(CycleError) as cm:
            self.executor.build(a)

        self.assertEqual(self.log, [])
        self.assertEqual(cm.exception.cycle, [a, b, a])

    def test_self_dependency(self):
        a = self.task("a")
        a.deps = [a]

        with self.assertRaises(CycleError) as cm:
            self.executor.build(a)

        self.assertEqual(cm.exception.cycle, [a, a])
        self.assertEqual(self.log, [])

    def test_cycle_below_root(self):
        """Test that only the tasks on the cycle are named."""
        leaf = self.task("leaf")
        x = self.task("x", leaf)
        y = self.task("y", x)
        x.deps = [leaf, y]
        root = self.task("root", x)

        with self.assertRaises(CycleError) as cm:
            self.executor.build(root)

        self.assertEqual(cm.exception.cycle, [x, y, x])
        self.assertNotIn(("build", "x"), self.log)
        self.assertNotIn(("build", "y"), self.log)

    def test_cycle_error_is_not_configuration_error(self):
        a = self.task("a")
        a.deps = [a]

        with self.assertRaises(CycleError) as cm:
            self.executor.build(a)

        self.assertNotIsInstance(cm.exception, ConfigurationError)
        self.assertIn("a", str(cm.exception))


class TestFailures(ExecutorTestCase):
    def test_failure_wrapped_in_task_execution_error(self):
        """Test that an exception from an action is reported as a task failure."""
        broken = self.task("broken", fail_on="build")

        with self.assertRaises(TaskExecutionError) as cm:
            self.executor.build(broken)

        self.assertIs(cm.exception.task, broken)
        self.assertIs(cm.exception.command, Command.BUILD)
        self.assertIsInstance(cm.exception.__cause__, RuntimeError)

    def test_failure_aborts_remaining_traversal(self):
        """Test that nothing after the failing task runs."""
        first = self.task("first")
        broken = self.task("broken", fail_on="build")
        root = self.task("root", first, broken, self.task("after"))
        other_root = self.task("other")

        with self.assertRaises(TaskExecutionError):
            self.executor.execute(Command.BUILD, [root, other_root])

        self.assertEqual(self.log, [("build", "first")])

    def test_failed_task_scope_recorded_as_failed(self):
        broken = self.task("broken", fail_on="build")

        with self.assertRaises(TaskExecutionError):
            self.executor.build(broken)

        self.assertEqual([r.name for r in self.recorder.failed()], ["RecordingTask(broken)"])
        self.assertEqual(self.recorder.succeeded(), [])

    def test_successful_tasks_recorded(self):
        dep = self.task("dep")
        root = self.task("root", dep)

        self.executor.build(root)

        self.assertEqual([r.task for r in self.recorder.succeeded()], [dep, root])
        self.assertTrue(all(r.command is Command.BUILD for r in self.recorder.records))

    def test_unlogged_tasks_have_no_scope(self):
        quiet = self.task("quiet", logged=False)

        self.executor.build(quiet)

        self.assertEqual(self.log, [("build", "quiet")])
        self.assertEqual(self.recorder.records, [])

    def test_configuration_error_from_action_propagates_unwrapped(self):
        class NeedsSetting(Task):
            def build(self, context):
                raise ConfigurationError("setting missing")

        with self.assertRaises(ConfigurationError):
            self.executor.build(NeedsSetting())

    def test_invalid_dependency_raises_before_running(self):
        """Test that a bad dependency member fails the traversal as a configuration error."""
        dep = self.task("dep")
        root = self.task("root", dep)
        root.deps = [dep, 3]

        with self.assertRaises(ConfigurationError):
            self.executor.build(root)

        self.assertEqual(self.log, [])

    def test_failed_task_can_be_retried_by_new_run(self):
        broken = self.task("broken", fail_on="build")

        with self.assertRaises(TaskExecutionError):
            self.executor.build(broken)

        broken.fail_on = None
        self.executor.build(broken)

        self.assertEqual(self.log, [("build", "broken")])


if __name__ == "__main__":
    unittest.main()

"""Example test sets; run with ``tsrunner run examples/math_sets/sets.py``."""
import asyncio

from tsrunner import Environment, TestCase, TestRunner, TestSet


class Counter:
    def __init__(self) -> None:
        self.value = 0

    def set_up(self) -> None:
        self.value = 10

    def tear_down(self) -> None:
        self.value = 0


COUNTER = Counter()


def _add(env: Counter) -> None:
    assert env.value + 1 == 11


def _sub(env: Counter) -> None:
    assert env.value - 1 == 8, f"expected 8, got {env.value - 1}"


async def _slow_mul(env: Counter) -> None:
    await asyncio.sleep(0.01)
    assert env.value * 2 == 20


MATH = TestSet(
    "math",
    [TestCase("add", _add), TestCase("sub", _sub), TestCase("mul", _slow_mul)],
    COUNTER,
)

TEXT = TestSet(
    "text",
    [
        TestCase("upper", lambda: None if "a".upper() == "A" else 1 / 0),
        TestCase("strip", lambda: None, set_up=lambda env: None),
    ],
    Environment(set_up=lambda: print("text: set up"), tear_down=lambda: print("text: tear down")),
)


def register(runner: TestRunner) -> None:
    runner.run(MATH)
    runner.run(TEXT)


if __name__ == "__main__":
    standalone = TestRunner.from_argv()
    register(standalone)
    standalone.close()

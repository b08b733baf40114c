from datetime import date

import pytest

from phrasebook.assertions import (
    ASYNC_ASSERTIONS,
    BUILTIN_ASSERTIONS,
    AsyncDispatcher,
    Dispatcher,
)


@pytest.fixture
def expect():
    return Dispatcher(BUILTIN_ASSERTIONS)


@pytest.fixture
def expect_async():
    return AsyncDispatcher(ASYNC_ASSERTIONS + BUILTIN_ASSERTIONS)


@pytest.fixture
def calls():
    """Records which routines ran, in order."""
    return []


@pytest.fixture
def recorder(calls):
    def make(name, result=None):
        def routine(*args):
            calls.append((name, args))
            return result

        return routine

    return make


@pytest.fixture
def june():
    return date(2024, 6, 15)


SUITE_YAML = """
version: 1
name: payload checks
env:
  MIN_LEN: 2
  GREETING: hi
data:
  user:
    name: "{{env.GREETING}}"
    tags: [a, b]
    age: 31
checks:
  - id: name-is-string
    from: "$.user.name"
    expect: ["to be a string", "and", "to be non-empty"]
  - id: tags-long-enough
    from: "$.user.tags"
    expect: ["to have length at least", "{{env.MIN_LEN}}"]
  - id: five-between
    subject: 5
    expect: ["to be between", 1, "and", 10]
"""


@pytest.fixture
def suite_yaml():
    return SUITE_YAML


@pytest.fixture
def suite_file(tmp_path, suite_yaml):
    path = tmp_path / "suite.yaml"
    path.write_text(suite_yaml)
    return path

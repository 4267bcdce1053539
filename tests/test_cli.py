"""
Tests the command line entrypoint, with actions living in a throwaway module
"""

import sys
import types

import pytest

from jobinvoke import __main__ as cli
from jobinvoke.low.core import ActionContext
from jobinvoke.low.func import resolve_callable


@pytest.fixture(scope="function")
def actions_module(monkeypatch):
    module = types.ModuleType("jobinvoke_test_actions")
    calls: list[dict] = []

    def add(x, y):
        calls.append({"x": x, "y": y})
        return True

    def explode():
        raise RuntimeError("explode")

    class WhoAmI:
        def execute(self, context: ActionContext):
            calls.append({"identity": context.identity.name})

    module.add = add
    module.explode = explode
    module.WhoAmI = WhoAmI
    module.calls = calls
    monkeypatch.setitem(sys.modules, module.__name__, module)
    monkeypatch.setenv("JOBINVOKE_DEFAULT_LOCALE", "it_IT")
    return module


def test_invoke(actions_module):
    status = cli.invoke("jobinvoke_test_actions.add", x=1, y=2)
    assert status.throwable is None
    assert status.requires_update is True
    assert actions_module.calls == [{"x": 1, "y": 2}]


def test_invoke_class_as_user(actions_module):
    status = cli.invoke("jobinvoke_test_actions.WhoAmI", user="dave")
    assert status.throwable is None
    assert actions_module.calls == [{"identity": "dave"}]


def test_main_exit_codes(actions_module, monkeypatch):
    # keep the logging setup of the test session intact
    monkeypatch.setattr(cli, "logging_config", {"version": 1, "disable_existing_loggers": False})
    assert cli.main("jobinvoke_test_actions.add", x=1, y=2) == 0
    assert cli.main("jobinvoke_test_actions.explode") == 1


def test_resolve_callable(actions_module):
    assert resolve_callable("jobinvoke_test_actions.add") is actions_module.add
    with pytest.raises(ValueError):
        resolve_callable("add")
    with pytest.raises(ValueError):
        resolve_callable("jobinvoke_test_actions.missing")
    with pytest.raises(TypeError):
        resolve_callable("jobinvoke_test_actions.calls")


def test_invoke_locale_from_env(actions_module):
    seen = {}

    def localized(user_locale):
        seen["user_locale"] = user_locale

    actions_module.localized = localized
    status = cli.invoke("jobinvoke_test_actions.localized")
    assert status.throwable is None
    assert seen == {"user_locale": "it_IT"}

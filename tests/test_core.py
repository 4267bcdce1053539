import pytest
from pydantic import ValidationError

from jobinvoke.config import InvokerConfig
from jobinvoke.low.core import (
    INVOKER_ACTIONCLASS,
    INVOKER_ACTIONID,
    WORK_ITEM_UID,
    ActionDetails,
    InvokeStatus,
    extract_uid,
)


def test_extract_uid():
    assert extract_uid(None) is None
    assert extract_uid(ActionDetails(action=None, parameters=None)) is None
    assert extract_uid(ActionDetails(action=None, parameters={})) is None

    params = {INVOKER_ACTIONCLASS: "pkg.Report", INVOKER_ACTIONID: "report.prpt"}
    details = ActionDetails(action=None, parameters=params)
    assert details.work_item_uid == "WI-report.prpt-pkg.Report"
    # deterministic across triggers
    assert ActionDetails(action=None, parameters=dict(params)).work_item_uid == details.work_item_uid

    assert extract_uid(ActionDetails(action=None, parameters={INVOKER_ACTIONCLASS: "pkg.Report"})) == "WI-pkg.Report"
    assert extract_uid(ActionDetails(action=None, parameters={**params, WORK_ITEM_UID: "explicit"})) == "explicit"
    assert extract_uid(ActionDetails(action=None, parameters={**params, WORK_ITEM_UID: " "})) == details.work_item_uid


def test_status_defaults():
    status = InvokeStatus()
    assert status.throwable is None
    assert not status.failed
    assert status.requires_update is False
    assert status.details == {}


def test_config_from_env(monkeypatch):
    monkeypatch.delenv("JOBINVOKE_DEFAULT_LOCALE", raising=False)
    monkeypatch.delenv("JOBINVOKE_SYSTEM_SESSION_USER", raising=False)
    config = InvokerConfig.from_env()
    assert config.default_locale
    assert config.system_session_user == "system session"

    monkeypatch.setenv("JOBINVOKE_DEFAULT_LOCALE", "pt_BR")
    monkeypatch.setenv("JOBINVOKE_SYSTEM_SESSION_USER", "scheduler")
    config = InvokerConfig.from_env()
    assert config.default_locale == "pt_BR"
    assert config.system_session_user == "scheduler"

    with pytest.raises(ValidationError):
        config.default_locale = "en"

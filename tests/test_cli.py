import json
import sys

import pytest

from ghclosebot import cli


@pytest.fixture(autouse=True)
def _keep_test_logging(monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


CONFIG = """
runtime:
  mode: active
github:
  token: t
states:
  opened: open
  closed: closed
policies:
  - repos: [octo]
"""


def _write_config(tmp_path, text: str = CONFIG):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_check_config(tmp_path, monkeypatch, capsys) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setattr(sys, "argv", ["ghclosebot", "--config", str(path), "check-config"])

    cli.main()

    assert "Configuration OK (1 policies)" in capsys.readouterr().out


def test_invalid_config_exits_non_zero(tmp_path, monkeypatch) -> None:
    path = _write_config(tmp_path, "github:\n  token: t\npolicies: []\n")
    monkeypatch.setattr(sys, "argv", ["ghclosebot", "--config", str(path), "check-config"])

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1


def test_handle_event_from_file(tmp_path, monkeypatch, capsys, fake_client) -> None:
    path = _write_config(tmp_path)
    payload = {
        "action": "created",
        "issue": {"number": 4, "state": "open", "user": {"login": "alice"}},
        "comment": {"body": "/close", "user": {"login": "alice"}},
        "repository": {"name": "repo", "owner": {"login": "octo"}},
    }
    payload_path = tmp_path / "event.json"
    payload_path.write_text(json.dumps(payload), encoding="utf-8")
    monkeypatch.setattr(cli, "build_client", lambda config: fake_client)
    monkeypatch.setattr(
        sys,
        "argv",
        ["ghclosebot", "--config", str(path), "handle-event", "--payload", str(payload_path)],
    )

    cli.main()

    assert "Handled: UpdateState" in capsys.readouterr().out
    assert fake_client.named("update_issue") == [("update_issue", "octo", "repo", 4, "closed")]
    assert fake_client.named("close") == [("close",)]

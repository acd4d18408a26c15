import json
from pathlib import Path

import pytest

from conftest import API_KEY
from notify_client import cli
from src.stub_state import EMAIL_TEMPLATE_ID, SMS_TEMPLATE_ID


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    for name in ("NOTIFY_API_KEY", "NOTIFY_BASE_URL", "NOTIFY_API_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_path(tmp_path: Path, stub_server) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"api_key": API_KEY, "base_url": stub_server.url, "timeout": 10}))
    return str(path)


def test_init_writes_config(tmp_path: Path, capsys):
    config_dir = tmp_path / "notify"

    assert cli.main(["init", API_KEY, "--config-dir", str(config_dir), "--base-url", "http://localhost:6011"]) == 0

    data = json.loads((config_dir / "config.json").read_text())
    assert data == {"api_key": API_KEY, "base_url": "http://localhost:6011"}
    assert "Created config file" in capsys.readouterr().out


def test_init_refuses_to_overwrite(tmp_path: Path):
    args = ["init", API_KEY, "--config-dir", str(tmp_path)]
    assert cli.main(args) == 0

    assert cli.main(args) == 1
    assert cli.main(args + ["--force"]) == 0


def test_init_rejects_invalid_key(tmp_path: Path, capsys):
    assert cli.main(["init", "short", "--config-dir", str(tmp_path)]) == 1
    assert "Invalid API key" in capsys.readouterr().err
    assert not (tmp_path / "config.json").exists()


def test_init_honours_config_path_from_environment(tmp_path: Path, monkeypatch, stub_server, capsys):
    path = tmp_path / "elsewhere" / "notify.json"
    monkeypatch.setenv("NOTIFY_API_CONFIG", str(path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    assert cli.main(["init", API_KEY, "--base-url", stub_server.url]) == 0

    assert json.loads(path.read_text())["api_key"] == API_KEY
    assert not (tmp_path / "xdg").exists()
    assert cli.main(["test"]) == 0
    assert "has 2 templates" in capsys.readouterr().out


@pytest.mark.parametrize("flags", [
    ["--status-callback-url", "https://example.com/cb"],
    ["--status-callback-bearer-token", "cb-token"],
])
def test_status_callback_flags_must_be_paired(config_path, stub_server, flags, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["send-sms", SMS_TEMPLATE_ID, "+61400000000", "--config", config_path] + flags)

    assert excinfo.value.code == 2
    assert "must be given together" in capsys.readouterr().err
    assert stub_server.state.received == []


def test_send_email(config_path, last_request, capsys):
    code = cli.main([
        "send-email", EMAIL_TEMPLATE_ID, "someone@example.com",
        "--config", config_path,
        "--reference", "cli-ref",
        "--email-reply-to-id", "reply-1",
        "-p", "name=Sam", "-p", "colour=green",
    ])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["reference"] == "cli-ref"
    assert output["content"]["body"] == "Hi Sam,\n\nMy favourite colour is green."

    body = last_request()["json"]
    assert body["email_reply_to_id"] == "reply-1"
    assert body["personalisation"] == {"name": "Sam", "colour": "green"}


def test_send_sms_with_sender(config_path, last_request, capsys):
    code = cli.main([
        "send-sms", SMS_TEMPLATE_ID, "+61400000000",
        "--config", config_path,
        "--sms-sender-id", "Council",
        "--status-callback-url", "https://example.com/cb",
        "--status-callback-bearer-token", "cb-token",
        "-p", "name=Sam", "-p", "day=Monday",
    ])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["content"]["from_number"] == "Council"
    body = last_request()["json"]
    assert body["status_callback_url"] == "https://example.com/cb"
    assert body["status_callback_bearer_token"] == "cb-token"


def test_api_error_is_reported(config_path, capsys):
    code = cli.main(["send-sms", SMS_TEMPLATE_ID, "+61400000000", "--config", config_path])

    assert code == 1
    assert "Missing personalisation" in capsys.readouterr().err


def test_bad_personalisation_argument(config_path, capsys):
    code = cli.main(["preview", EMAIL_TEMPLATE_ID, "--config", config_path, "-p", "no-equals-sign"])

    assert code == 1
    assert "key=value" in capsys.readouterr().err


def test_templates_and_template(config_path, capsys):
    assert cli.main(["templates", "--type", "sms", "--config", config_path]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert [template["id"] for template in listed] == [SMS_TEMPLATE_ID]

    assert cli.main(["template", EMAIL_TEMPLATE_ID, "--version", "1", "--config", config_path]) == 0
    assert json.loads(capsys.readouterr().out)["version"] == 1


def test_preview(config_path, capsys):
    code = cli.main(["preview", EMAIL_TEMPLATE_ID, "--config", config_path, "-p", "name=KD", "-p", "colour=red"])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["subject"] == "Hello KD"


def test_connection_check(config_path, capsys):
    assert cli.main(["test", "--config", config_path]) == 0
    assert "has 2 templates" in capsys.readouterr().out


def test_connection_failure(tmp_path: Path, capsys):
    path = tmp_path / "config.json"
    # nothing listens on port 9 (discard) locally
    path.write_text(json.dumps({"api_key": API_KEY, "base_url": "http://127.0.0.1:9", "timeout": 2}))

    assert cli.main(["test", "--config", str(path)]) == 1
    assert "Connection failed" in capsys.readouterr().err

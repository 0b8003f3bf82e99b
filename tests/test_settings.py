from __future__ import annotations

import json

import pytest

import settings


def _write_config(tmp_path, data: dict) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_missing_config_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        settings.load_config(str(tmp_path / "absent.json"))


def test_config_path_from_environment(tmp_path, monkeypatch) -> None:
    path = _write_config(tmp_path, {"zulip": {"stream": "builds"}})
    monkeypatch.setenv("BUILDNOTIFY_CONFIG", path)
    assert settings.load_config()["zulip"]["stream"] == "builds"


def test_notification_config_reads_zulip_block(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ZULIP_API_KEY", "from-env")
    raw = settings.load_config(
        _write_config(
            tmp_path,
            {
                "zulip": {
                    "url": "https://zulip.example.com/api",
                    "email": "bot@example.com",
                    "stream": "builds",
                    "link_base_url": "http://ci.example.com",
                    "smart_notify": True,
                }
            },
        )
    )

    config = settings.notification_config(raw)

    assert config.service_url == "https://zulip.example.com/api"
    assert config.credential_email == "bot@example.com"
    assert config.api_key == "from-env"
    assert config.default_stream == "builds"
    assert config.default_title == ""
    assert config.smart_notify is True


def test_project_override_blank_values_are_absent() -> None:
    raw = {"projects": {"foo": {"stream": "foo-ci", "title": "", "message": "Hi $USER"}}}

    override = settings.project_override(raw, "foo")

    assert override.stream == "foo-ci"
    assert override.title is None
    assert override.extra_message == "Hi $USER"


def test_unknown_project_has_no_override() -> None:
    override = settings.project_override({}, "bar")
    assert override.stream is None
    assert override.title is None
    assert override.extra_message is None


def test_null_values_become_empty_strings() -> None:
    config = settings.notification_config(
        {"zulip": {"stream": "builds", "title": None, "link_base_url": None, "smart_notify": None}}
    )

    assert config.default_stream == "builds"
    assert config.default_title == ""
    assert config.link_base_url == ""
    assert config.smart_notify is False


@pytest.mark.parametrize(
    "raw_flag, expected",
    [(True, True), (False, False), ("true", True), ("false", False), ("No", False), ("1", True)],
)
def test_smart_notify_flag_is_parsed_strictly(raw_flag, expected) -> None:
    config = settings.notification_config({"zulip": {"smart_notify": raw_flag}})
    assert config.smart_notify is expected


def test_unrecognized_smart_notify_flag_raises() -> None:
    with pytest.raises(ValueError, match="smart_notify"):
        settings.notification_config({"zulip": {"smart_notify": "sometimes"}})

import dataclasses
import json

import pytest

from utils.config import Config, ConfigError, TOR_PROXY, build_config, parse_headers


def test_defaults(make_config):
    config = make_config()
    assert config.method == "GET"
    assert config.threads == 4
    assert config.retries == 1
    assert config.retry_delay == 0.5
    assert config.recursion_depth == 2
    assert config.follow_redirects is True
    assert config.match_codes == ()
    assert config.match_regex is None
    assert config.proxies is None


def test_config_is_read_only(make_config):
    config = make_config(headers=["X-A: 1"])
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.threads = 99
    with pytest.raises(TypeError):
        config.headers["X-B"] = "2"


def test_parses_option_strings(make_config):
    config = make_config(extensions=".php, .html,", match_codes="200,301", match_regex="welc.me",
                         headers=["Authorization: Bearer FUZZ", "X-Empty:"])
    assert config.extensions == (".php", ".html")
    assert config.match_codes == (200, 301)
    assert config.match_regex.search(b"welcome")
    assert dict(config.headers) == {"Authorization": "Bearer FUZZ", "X-Empty": ""}


def test_proxies(make_config):
    assert make_config(proxy="http://127.0.0.1:8080").proxies == {
        "http": "http://127.0.0.1:8080",
        "https": "http://127.0.0.1:8080",
    }
    assert make_config(tor=True).proxies == {"http": TOR_PROXY, "https": TOR_PROXY}


@pytest.mark.parametrize("options, message", [
    ({"url": "http://x/admin"}, "FUZZ"),
    ({"url": "ftp://x/FUZZ"}, "http"),
    ({"threads": 0}, "Thread"),
    ({"retries": -1}, "Retry"),
    ({"min_length": 10, "max_length": 5}, "exceeds"),
    ({"match_regex": "(broken"}, "regex"),
    ({"match_codes": "20x"}, "status code"),
    ({"headers": ["NoColon"]}, "header"),
    ({"timeout": 0}, "Timeout"),
])
def test_invalid_options(make_config, options, message):
    with pytest.raises(ConfigError, match=message):
        make_config(**options)


def test_unreadable_wordlist(tmp_path):
    with pytest.raises(ConfigError, match="wordlist"):
        build_config(url="http://x/FUZZ", wordlist=str(tmp_path / "missing.txt"))


def test_parse_headers_splits_on_first_colon():
    assert parse_headers(["Referer: http://x/FUZZ"]) == {"Referer": "http://x/FUZZ"}
    assert parse_headers(None) == {}


def test_persisted_defaults_round_trip(tmp_path):
    path = tmp_path / "conf" / "config.json"
    config = Config(path)
    assert config.get_defaults() == {}

    config.set_defaults({"threads": 40, "retries": 3, "url": "http://x/FUZZ", "proxy": None})
    config.save()

    reloaded = Config(path)
    assert reloaded.get_defaults() == {"threads": 40, "retries": 3}


def test_invalid_config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        Config(path)

    path.write_text("{not json")
    with pytest.raises(ConfigError):
        Config(path)


def test_unknown_keys_in_config_file_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"defaults": {"threads": 5, "url": "http://evil/FUZZ"}}))
    assert Config(path).get_defaults() == {"threads": 5}


def test_placeholder_in_body_only(make_config):
    config = make_config(url="http://x/login", method="POST", data="user=FUZZ&pass=x")
    assert config.url == "http://x/login"
    assert config.data == "user=FUZZ&pass=x"


def test_empty_url_rejected(make_config):
    with pytest.raises(ConfigError, match="URL"):
        make_config(url="", data="user=FUZZ")

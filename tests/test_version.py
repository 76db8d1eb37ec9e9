import io
import json
import urllib.error
from unittest import mock

import pytest

from gobe import version
from gobe.version import (
    VersionService,
    compare_versions,
    get_git_model_url,
    get_latest_version_from_git,
    get_version,
    get_version_info,
    main,
    parse_version,
)


class FakeResponse:
    def __init__(self, body=b"", status=200, url=""):
        self._body = body
        self.status = status
        self._url = url

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def read(self):
        return self._body

    def geturl(self):
        return self._url


def test_parse_version():
    assert parse_version("1.2.3") == [1, 2, 3]
    assert parse_version("4.5") == [4, 5, 0]
    assert parse_version("v1.0.1") is None
    assert parse_version("1.2.3.4") is None


def test_compare_versions():
    assert compare_versions([1, 2, 3], [1, 2, 3]) == 0
    assert compare_versions([1, 3, 0], [1, 2, 9]) == 1
    assert compare_versions([0, 9, 9], [1, 0, 0]) == -1
    with pytest.raises(ValueError):
        compare_versions([1, 2], [1, 2, 3])


def test_is_latest_version():
    assert VersionService("1.2.3", "1.2.3").is_latest_version() is True
    assert VersionService("1.2.0", "1.2.3").is_latest_version() is True
    assert VersionService("1.3.0", "1.2.9").is_latest_version() is False


def test_is_latest_version_parse_error():
    with pytest.raises(ValueError):
        VersionService("v1.0.1", "1.0.1").is_latest_version()


def test_get_latest_version_fetches_first_tag():
    body = json.dumps([{"name": "2.0.0"}, {"name": "1.0.0"}]).encode()
    with mock.patch("urllib.request.urlopen", return_value=FakeResponse(body)) as opened:
        service = VersionService("1.0.0")
        assert service.get_latest_version() == "2.0.0"
        assert service.get_latest_version() == "2.0.0"
    assert opened.call_count == 1
    assert opened.call_args[0][0].endswith("/tags")


def test_get_latest_version_without_tags():
    with mock.patch("urllib.request.urlopen", return_value=FakeResponse(b"[]")):
        with pytest.raises(ValueError):
            VersionService("1.0.0").get_latest_version()


def test_get_version_fallback():
    assert get_version() == version.CURRENT_VERSION_FALLBACK


def test_get_version_info():
    info = get_version_info()
    assert info == f"Version: {get_version()}\nGit repository: {get_git_model_url()}"


def test_latest_version_from_redirect():
    response = FakeResponse(url="https://example.com/gobe/gobe/releases/tag/v9.8.7")
    with mock.patch("urllib.request.urlopen", return_value=response):
        assert get_latest_version_from_git() == "v9.8.7"


def test_latest_version_http_error():
    error = urllib.error.HTTPError(
        "https://example.com/x", 404, "Not Found", {}, io.BytesIO(b"missing")
    )
    with mock.patch("urllib.request.urlopen", side_effect=error):
        assert get_latest_version_from_git() == "ErrorCtx: 404 Not Found\nResponse: missing"


def test_main_prints_version(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out.strip() == get_version_info()
import pytest

from tools.jdk_url import cli
from tools.jdk_url.versions import JDK_URLS, UnknownJavaVersionError, resolve_jdk_url


@pytest.mark.parametrize("keyword", sorted(JDK_URLS))
def test_known_keyword_prints_url_and_exits_zero(keyword: str, capsys) -> None:
    assert cli.main([keyword]) == 0

    out = capsys.readouterr().out
    assert out == JDK_URLS[keyword] + "\n"


def test_java17_url() -> None:
    assert resolve_jdk_url("java17") == (
        "https://github.com/bell-sw/Liberica/releases/download/17.0.3.1+2/"
        "bellsoft-jdk17.0.3.1+2-linux-amd64.tar.gz"
    )


@pytest.mark.parametrize("argv", [["java21"], ["JAVA8"], [""], []])
def test_unknown_keyword_prints_message_and_exits_one(argv: list[str], capsys) -> None:
    assert cli.main(argv) == 1

    captured = capsys.readouterr()
    assert captured.out == "Unknown java version\n"
    assert captured.err == ""


def test_resolve_unknown_raises_value_error() -> None:
    with pytest.raises(UnknownJavaVersionError) as exc_info:
        resolve_jdk_url("java9")

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.keyword == "java9"

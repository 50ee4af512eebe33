"""Download URLs of the Liberica JDK builds used by CI images."""

from __future__ import annotations

UNKNOWN_VERSION_MESSAGE = "Unknown java version"

JDK_URLS: dict[str, str] = {
    "java8": "https://github.com/bell-sw/Liberica/releases/download/8u382%2B6/bellsoft-jdk8u382+6-linux-amd64.tar.gz",
    "java11": "https://github.com/bell-sw/Liberica/releases/download/11.0.15.1+2/bellsoft-jdk11.0.15.1+2-linux-amd64.tar.gz",
    "java17": "https://github.com/bell-sw/Liberica/releases/download/17.0.3.1+2/bellsoft-jdk17.0.3.1+2-linux-amd64.tar.gz",
}


class UnknownJavaVersionError(ValueError):
    def __init__(self, keyword: str) -> None:
        self.keyword = keyword
        super().__init__(UNKNOWN_VERSION_MESSAGE)


def resolve_jdk_url(keyword: str) -> str:
    try:
        return JDK_URLS[keyword]
    except KeyError:
        raise UnknownJavaVersionError(keyword) from None

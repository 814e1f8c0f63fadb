from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from click.testing import CliRunner

SAMPLE_TEXT = """
# Comment
id = /home
logDir = /home/a
logFile = my.log

supporting =
    classA
    classB
    classC

# Comment
[server.http]
    # Server specification
    port = 8080
    ; Server specification
    mode = debug
    keys =
        keyOne
        keyTwo
        keyThree
    colors =
        red
        green
        blue

[map.texts]
    html = <br>can have tags</br>
    hello = Hey there !
    bye = See ya :)
    random = s=f(x)
    last/mine = MUST BE PRESENT

[map.redirects]
    ^abc/def$ = efg
    ^bed/bye$ += lko
    MUST_APPPEND

[map.Press | ABC]
    logo = smh.png
    url = /a/b/smh
    keywords =
        apples
        oranges
        persimmons

    blurb += Hello, this is short SMH blurb
            Append ABC Second line.
            Append ABC Third line.


[map.Press | XYZ]
    logo = brw.png
    url = /a/b/brw

    blurb += This BRW blurb is about writing blurbs.
            Append XYZ Second line.
            Append XYZ Third line.

    b += Only one line. EOL.

    c = ######
    keywords =
        carrot
        beetroot
    love = true
    blurb3 += Only one line, next must be new map. EOL.

[map.Press | employers-start ]
date = Aug 15, 2013
a += <ol>As an employer you can get started.
<li>
 <ins>1.</ins> Post a role.
</li>
</ol>

[map.Press | ZZZ]
    head = ZZZ Head
    blurb = ZZZ Text
"""


@dataclass
class ServerHttp:
    port: str = ""
    mode: str = ""
    keys: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)


@dataclass
class SampleConfig:
    id: str = ""
    log_dir: str = ""
    log_file: str = ""
    supporting: list[str] = field(default_factory=list)
    server_http: ServerHttp = field(default_factory=ServerHttp)
    texts: dict[str, str] = field(default_factory=dict)
    redirects: dict[str, str] = field(default_factory=dict)
    press: dict[str, dict[str, str]] = field(default_factory=dict)


EXPECTED_PRESS = {
    "ABC": {
        "logo": "smh.png",
        "url": "/a/b/smh",
        "keywords": "",
        "blurb": "Hello, this is short SMH blurb Append ABC Second line. Append ABC Third line.",
    },
    "XYZ": {
        "logo": "brw.png",
        "url": "/a/b/brw",
        "blurb": "This BRW blurb is about writing blurbs. Append XYZ Second line. Append XYZ Third line.",
        "b": "Only one line. EOL.",
        "c": "######",
        "keywords": "",
        "love": "true",
        "blurb3": "Only one line, next must be new map. EOL.",
    },
    "employers-start": {
        "date": "Aug 15, 2013",
        "a": "<ol>As an employer you can get started. <li> <ins>1.</ins> Post a role. </li> </ol>",
    },
    "ZZZ": {
        "head": "ZZZ Head",
        "blurb": "ZZZ Text",
    },
}


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture()
def sample_config() -> SampleConfig:
    return SampleConfig()


@pytest.fixture()
def expected_press() -> dict[str, dict[str, str]]:
    return EXPECTED_PRESS

"""
Shared fixtures: a four-key spec and a folder of dotenv files.
"""

import pytest

from envcascade import KeyRule
from envcascade.rules import Number, String

ENV_FILES = {
    "test1.env": "TEST1=abc\nTEST2=123\n",
    "test2.env": "# TEST1 missing\nTEST2=123\n",
    "test3.env": "TEST1=abc\nTEST2=abc\n",
    "test4.env": "# nothing set\n",
    "test5.env": "TEST2=abc\n",
    "test6.env": "TEST1=abc\nTEST2=123\nTEST4=FOURTYFOUR\n",
    "test7.env": "TEST1=abc\nTEST2=123\nEXTRA=abc\n",
}


@pytest.fixture
def spec():
    return {
        "TEST1": KeyRule(String(), required=True),
        "TEST2": KeyRule(Number(), required=True),
        "TEST3": KeyRule(Number(), required=False, default=3333),
        "TEST4": KeyRule(String(), required=False, default="4444"),
    }


@pytest.fixture
def root(tmp_path):
    """Project root with testconfigs/config/<name>.env files."""
    config_dir = tmp_path / "testconfigs" / "config"
    config_dir.mkdir(parents=True)
    for name, content in ENV_FILES.items():
        (config_dir / name).write_text(content)
    return tmp_path

from pathlib import Path

import pytest

from iterm2_bookmarks.config_loader import derive_labels
from iterm2_bookmarks.models import Bookmark, Catalog

SAMPLE_CATALOG = '''\
[vars]
user = "deploy"

[cmds]
ssh = "ssh {{user}}@{{host}}"

[[bookmarks]]
name = "devbox"
desc = "Shell on the dev box"
cmds = ["cmd::ssh"]
labels = ["dev"]
vars = { host = "dev.example.com" }

[[bookmarks]]
name = "prod-shell"
desc = "Shell on production"
cmds = ["cmd::ssh"]
labels = ["prod", "ssh"]
vars = { host = "prod.example.com" }
exec = true

[[bookmarks]]
name = "build"
cmds = ["make clean", "make {{target}}"]
labels = ["dev"]
vars = { target = "all" }
'''


def make_catalog(*bookmarks: Bookmark, variables=None, macros=None) -> Catalog:
    return Catalog(
        vars=dict(variables or {}),
        cmds=dict(macros or {}),
        bookmarks=list(bookmarks),
        labels=derive_labels(list(bookmarks)),
    )


@pytest.fixture
def catalog_file(tmp_path) -> Path:
    path = tmp_path / "bookmarks.toml"
    path.write_text(SAMPLE_CATALOG, encoding="utf-8")
    return path

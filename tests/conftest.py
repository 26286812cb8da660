import os

import pytest


@pytest.fixture
def make_file(tmp_path):
    """Create a file under tmp_path with the given content and mtime."""

    def _make(name, content=b"", mtime=None):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        path.write_bytes(content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("MSF_ALLOW_EMPTY", "MSF_SORT_ENTRIES", "MSF_NAME_POLICY", "MSF_ALLOW_UNSAFE_PATHS", "MSF_CHUNK_SIZE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_tree(tmp_path):
    root = tmp_path / "src"
    (root / "sub").mkdir(parents=True)
    (root / "readme.txt").write_bytes(b"hello world")
    (root / "sub" / "data.bin").write_bytes(b"\x01\x02\x03")
    return root

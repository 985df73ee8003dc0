import json
import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import main
from content import ContentStore
from datafiles import DataFileStore

SAMPLE_DIR = Path(__file__).resolve().parent.parent / "work_list"


@pytest.fixture
def data_dir(tmp_path):
    target = tmp_path / "work_list"
    shutil.copytree(SAMPLE_DIR, target)
    return target


@pytest.fixture
def write_json(data_dir):
    def _write(filename, data):
        (data_dir / filename).write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return _write


@pytest.fixture
def store(data_dir):
    return ContentStore(data_dir)


@pytest.fixture
def client(data_dir):
    main.app.dependency_overrides[main.get_content_store] = lambda: ContentStore(data_dir)
    main.app.dependency_overrides[main.get_file_store] = lambda: DataFileStore(data_dir, hidden=main.config.HIDDEN_FILES)
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()

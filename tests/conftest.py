import os
import shutil
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

os.environ.setdefault("DDW_ENVIRONMENT", "test")
os.environ.setdefault("DDW_LOG_JSON", "false")
os.environ.setdefault("DDW_CLASSPATH", "")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from ddworkflow.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from ddworkflow.core.resources import Classpath  # noqa: E402
from ddworkflow.workflow_engine import EngineConfig, build_process_engine  # noqa: E402

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

SQLITE_PROPERTIES: Dict[str, str] = {
    "database.jdbc.url": "sqlite://",
    "database.jdbc.username": "camunda",
    "database.jdbc.password": "s3cr3t",
    "camunda.schema.update": "true",
    "camunda.job.executor.activate": "true",
    "camunda.process.definition.key": "simple-process",
    "camunda.process.resource": "processes/simple-process.bpmn",
    "database.connection.pool.max": "10",
    "database.connection.pool.min": "2",
}


@pytest.fixture()
def classpath_dir(tmp_path: Path) -> Path:
    """A directory holding the test BPMN fixtures under ``processes/``."""

    shutil.copytree(FIXTURES_DIR / "processes", tmp_path / "processes")
    return tmp_path


@pytest.fixture()
def classpath(classpath_dir: Path) -> Classpath:
    return Classpath([classpath_dir])


@pytest.fixture()
def write_properties(classpath_dir: Path) -> Callable[..., Path]:
    def _write(entries: Dict[str, str], name: str = "test.properties") -> Path:
        path = classpath_dir / name
        lines = [f"{key}={value}" for key, value in entries.items()]
        path.write_text("# generated for tests\n" + "\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def engine_config() -> EngineConfig:
    return EngineConfig(
        jdbc_url="sqlite://",
        process_definition_key="simple-process",
        process_resource="processes/simple-process.bpmn",
    )


@pytest.fixture()
def process_engine(engine_config: EngineConfig, classpath: Classpath):
    engine = build_process_engine(engine_config, classpath)
    yield engine
    engine.close()


@pytest.fixture()
def sqlite_properties() -> Dict[str, str]:
    return dict(SQLITE_PROPERTIES)

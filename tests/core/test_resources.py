from __future__ import annotations

from ddworkflow.core.config import AppSettings
from ddworkflow.core.resources import Classpath, classpath_from_settings


def test_operator_directories_shadow_bundled_resources(tmp_path) -> None:
    (tmp_path / "application.properties").write_text("override=true\n", encoding="utf-8")

    resource = Classpath([tmp_path]).find("application.properties")

    assert resource is not None
    assert resource.read_text(encoding="utf-8") == "override=true\n"


def test_falls_back_to_bundled_resources(tmp_path) -> None:
    resource = Classpath([tmp_path]).find("processes/simple-process.bpmn")

    assert resource is not None
    assert b"simple-process" in resource.read_bytes()


def test_missing_and_empty_names_resolve_to_none(tmp_path) -> None:
    classpath = Classpath([tmp_path], include_bundled=False)

    assert classpath.find("nope.bpmn") is None
    assert classpath.find("") is None
    assert classpath.find("processes") is None


def test_classpath_from_settings_orders_extra_roots_first(tmp_path) -> None:
    settings = AppSettings(classpath=f"{tmp_path / 'a'}, {tmp_path / 'b'}")

    classpath = classpath_from_settings(settings, [tmp_path / "cli"])

    roots = [str(root) for root in classpath.roots]
    assert roots[:3] == [str(tmp_path / "cli"), str(tmp_path / "a"), str(tmp_path / "b")]
    assert len(roots) == 4

"""Tests for extracting, rewriting and writing the function config."""
import json

import pytest

from fnpack.bundler import build
from fnpack.config import (
    CONFIG_FILENAME,
    DOCKERFILE_NAME,
    PLACEHOLDER_NAME,
    PLACEHOLDER_ORIGIN,
    read_config,
    update_config,
    write_config_file,
)
from fnpack.errors import ContractError, UnsupportedStepFunctions
from fnpack.model import FunctionConfig


def test_read_config_passes_placeholder_context(tmp_path, function_file):
    config = read_config(build(function_file.name, cwd=tmp_path))

    assert config.step_ids == ["step"]
    extra = config.model_dump()
    assert extra["origin"] == PLACEHOLDER_ORIGIN
    assert extra["placeholder_name"] == PLACEHOLDER_NAME


def test_read_config_rejects_step_functions(tmp_path, make_module, multi_step_source):
    make_module(tmp_path, "multi.py", multi_step_source)
    with pytest.raises(UnsupportedStepFunctions, match="Step functions are not yet supported") as exc:
        read_config(build("multi.py", cwd=tmp_path))
    assert exc.value.step_ids == ["first", "second"]


def test_read_config_rejects_wrong_shape(tmp_path, make_module):
    path = make_module(
        tmp_path,
        "shapeless.py",
        """
        def get_config(origin, name):
            return {"steps": {"step": {"runtime": {}}}}

        def run_step(step_id, data):
            return data
        """,
    )
    with pytest.raises(ContractError, match="invalid config"):
        read_config(path)


def test_read_config_rejects_non_mapping(tmp_path, make_module):
    path = make_module(
        tmp_path,
        "listy.py",
        """
        def get_config(origin, name):
            return ["step"]

        def run_step(step_id, data):
            return data
        """,
    )
    with pytest.raises(ContractError, match="must return a mapping"):
        read_config(path)


def test_update_config_points_steps_at_dockerfile():
    config = FunctionConfig.model_validate({
        "name": "hello",
        "steps": {"step": {"path": "file://./hello.py", "runtime": {"type": "http", "url": "x"}}},
    })

    result = update_config(config)

    assert result is config
    step = config.steps["step"]
    assert step.path == "file://."
    assert step.runtime == {"type": "docker", "dockerfile": f"./{DOCKERFILE_NAME}"}
    assert config.model_dump()["name"] == "hello"


def test_write_config_file_keeps_extra_fields(tmp_path):
    config = update_config(FunctionConfig.model_validate({
        "id": "fn-1",
        "triggers": [{"event": "demo/hello"}],
        "steps": {"step": {"path": "", "runtime": {}, "name": "Hello"}},
    }))

    path = write_config_file(config, cwd=tmp_path)

    assert path == tmp_path / CONFIG_FILENAME
    text = path.read_text()
    assert text.startswith("{\n  ")
    data = json.loads(text)
    assert data["id"] == "fn-1"
    assert data["triggers"] == [{"event": "demo/hello"}]
    assert data["steps"]["step"]["name"] == "Hello"
    assert data["steps"]["step"]["runtime"]["type"] == "docker"


def test_read_config_accepts_pydantic_model(tmp_path, make_module):
    path = make_module(
        tmp_path,
        "modelled.py",
        """
        from typing import Dict

        from pydantic import BaseModel


        class Step(BaseModel):
            path: str
            runtime: Dict[str, str]


        class Config(BaseModel):
            name: str
            steps: Dict[str, Step]


        def get_config(origin, name):
            return Config(name="typed", steps={"greet": Step(path="", runtime={"type": "http"})})

        def run_step(step_id, data):
            return data
        """,
    )

    config = read_config(path)

    assert config.step_ids == ["greet"]
    assert config.steps["greet"].runtime == {"type": "http"}
    assert config.model_dump()["name"] == "typed"

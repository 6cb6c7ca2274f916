import argparse
import sys
from pathlib import Path

from dotenv import dotenv_values

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
sys.path.append(str(ROOT / "scripts"))

import dev_setup


def _args(env_path, **overrides):
    values = {option: None for option in dev_setup.ENV_OPTIONS}
    values.update(overrides)
    return argparse.Namespace(env_path=env_path, skip_db=True, **values)


def test_update_env_file_writes_given_options(tmp_path):
    env_path = tmp_path / ".env"

    values = dev_setup.update_env_file(_args(env_path, groq_api_key="gsk-test", llm_model="llama-3.1-8b-instant"))

    assert values["FLASK_APP"] == "scenebreak:create_app"
    assert values["GROQ_API_KEY"] == "gsk-test"
    assert values["LLM_MODEL"] == "llama-3.1-8b-instant"
    assert "SECRET_KEY" not in values
    assert dotenv_values(env_path) == values


def test_update_env_file_keeps_unrelated_settings(tmp_path):
    env_path = tmp_path / ".env"
    env_path.write_text("LOG_LEVEL=DEBUG\nLLM_MODEL=old-model\n")

    values = dev_setup.update_env_file(_args(env_path, llm_model="new-model"))

    assert values["LOG_LEVEL"] == "DEBUG"
    assert values["LLM_MODEL"] == "new-model"

from pathlib import Path

import pytest

from smartflow.sources.templates import load_template

EXAMPLE = Path(__file__).resolve().parents[1] / "src" / "smartflow" / "config" / "employment_agreement.yaml"

@pytest.fixture
def example_path() -> Path:
    return EXAMPLE

@pytest.fixture
def template():
    return load_template(str(EXAMPLE))

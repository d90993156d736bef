import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def test_readme_is_the_project_readme():
    project = tomllib.loads((ROOT / "pyproject.toml").read_text())["project"]
    readme = ROOT / project["readme"]
    assert readme.name == "README.md"
    assert readme.read_text().startswith("# MedStore")

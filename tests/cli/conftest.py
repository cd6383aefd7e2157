"""Pytest configuration and fixtures for CLI tests."""

import pytest
from click.testing import CliRunner

BIBLATEX_FILE = r"""@Comment{jabref-meta: databaseType:biblatex;}

@Article{doe2024,
  author       = {Doe, John and Smith, Jane},
  title        = {Quantum Computing Advances},
  journaltitle = {Nature Quantum},
  year         = {2024},
  volume       = {12},
  number       = {3},
  issue        = {9},
  pages        = {1--10},
  doi          = {10.1038/s41567-024-0001},
}

@InProceedings{smith2023,
  author    = {Sm{\"i}th, Jane},
  title     = {Machine Learning for Climate},
  booktitle = {NeurIPS 2023},
  year      = {2023},
  issue     = {7},
}
"""

CUSTOM_STYLE = """<?xml version="1.0" encoding="utf-8"?>
<style xmlns="http://purl.org/net/xbiblio/csl" class="in-text" version="1.0">
  <info>
    <title>Titles only</title>
    <id>titles</id>
  </info>
  <citation>
    <layout prefix="(" suffix=")" delimiter="; ">
      <text variable="title"/>
    </layout>
  </citation>
  <bibliography>
    <layout>
      <text variable="title"/>
    </layout>
  </bibliography>
</style>
"""


@pytest.fixture(autouse=True)
def work_dir(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def bib_file(work_dir):
    """BibLaTeX file with two entries."""
    path = work_dir / "refs.bib"
    path.write_text(BIBLATEX_FILE, encoding="utf-8")
    return path


@pytest.fixture
def styles_dir(work_dir):
    """Directory holding one extra CSL style."""
    directory = work_dir / "styles"
    directory.mkdir()
    (directory / "titles.csl").write_text(CUSTOM_STYLE, encoding="utf-8")
    return directory


@pytest.fixture
def cli_runner():
    """Click CLI test runner with custom invoke method."""

    class BibciteCliRunner(CliRunner):
        def invoke(self, args, **kwargs):  # type: ignore
            """Invoke the bibcite group when given a list of arguments."""
            from bibcite.cli.main import cli

            if isinstance(args, list):
                return super().invoke(cli, args, **kwargs)
            return super().invoke(args, **kwargs)

    return BibciteCliRunner()

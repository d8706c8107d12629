"""
Tests for the command-line interface

Tests cover:
- packs / requirements listings
- assess with text and JSON output
- unified across several input files
- Exit codes for errors and missing commands
"""
import json
import logging

import pytest
import yaml

from caelex.cli import load_input, main
from caelex.exceptions import AssessmentError

from tests.conftest import PACKS_DIR
from tests.test_assessment import COPUOS, NIS2, UK


@pytest.fixture(autouse=True)
def reset_caelex_logger():
    """The CLI configures the package logger; undo it after each test."""
    logger = logging.getLogger("caelex")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if getattr(handler, "_caelex_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(level)


@pytest.fixture
def cubesat_input(tmp_path, leo_cubesat_profile):
    path = tmp_path / "cubesat.yaml"
    path.write_text(yaml.safe_dump({
        "pack_id": COPUOS,
        "profile": leo_cubesat_profile,
        "assessments": [
            {"requirement_id": "iadc-5.3.2-leo", "status": "compliant"},
            {"requirement_id": "copuos-lts-a5", "status": "partial"},
        ],
    }))
    return path


def run(*args):
    return main(["--packs-dir", str(PACKS_DIR), *args])


# =============================================================================
# Browsing
# =============================================================================

class TestBrowse:
    """packs and requirements commands."""

    def test_packs(self, capsys):
        """Every bundled pack is listed."""
        assert run("packs") == 0
        out = capsys.readouterr().out
        for pack_id in (COPUOS, UK, NIS2):
            assert pack_id in out

    def test_packs_domain_filter(self, capsys):
        """--domain narrows the listing."""
        assert run("packs", "--domain", "uk_space") == 0
        out = capsys.readouterr().out
        assert UK in out
        assert COPUOS not in out

    def test_packs_with_load_errors(self, tmp_path, capsys):
        """A broken pack file is reported and the exit code is 1."""
        (tmp_path / "broken.yaml").write_text("id: [unclosed\n")
        assert main(["--packs-dir", str(tmp_path), "packs"]) == 1
        assert "broken.yaml" in capsys.readouterr().err

    def test_requirements(self, capsys):
        """Requirements of one category with a count line."""
        assert run("requirements", UK, "--category", "operator_licensing") == 0
        out = capsys.readouterr().out
        assert "6 requirements" in out


# =============================================================================
# Assessment
# =============================================================================

class TestAssess:
    """assess and unified commands."""

    def test_assess_text(self, cubesat_input, capsys):
        """Text report shows the score and gaps."""
        assert run("assess", COPUOS, str(cubesat_input)) == 0
        out = capsys.readouterr().out
        assert f"ASSESSMENT: {COPUOS}" in out
        assert "GAPS" in out

    def test_assess_json(self, cubesat_input, capsys):
        """--json prints the full result."""
        assert run("assess", COPUOS, str(cubesat_input), "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["pack_id"] == COPUOS
        assert data["requirement_statuses"]["copuos-lts-a5"] == "partial"

    def test_assess_json_input(self, tmp_path, nis2_large_profile, capsys):
        """JSON input files are accepted."""
        path = tmp_path / "nis2.json"
        path.write_text(json.dumps({"profile": nis2_large_profile}))
        assert run("assess", NIS2, str(path), "--json") == 0
        assert json.loads(capsys.readouterr().out)["domain"] == "nis2"

    def test_unified(self, cubesat_input, tmp_path, nis2_large_profile, capsys):
        """Unified combines every input file."""
        nis2 = tmp_path / "nis2.yaml"
        nis2.write_text(yaml.safe_dump({"pack_id": NIS2, "profile": nis2_large_profile}))
        assert run("unified", str(cubesat_input), str(nis2), "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["pack_ids"] == [COPUOS, NIS2]

    def test_unified_text(self, cubesat_input, capsys):
        """Text report lists every module."""
        assert run("unified", str(cubesat_input)) == 0
        out = capsys.readouterr().out
        assert "UNIFIED SCORE" in out
        assert "cybersecurity" in out


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Exit codes and input handling."""

    def test_no_command(self, capsys):
        """Without a command, help is printed and the exit code is 1."""
        assert main([]) == 1

    def test_unknown_pack(self, cubesat_input, capsys):
        """Caelex errors exit with 2 and a message on stderr."""
        assert run("assess", "NOPE", str(cubesat_input)) == 2
        assert "CX_PACK_NOT_FOUND" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """A missing input file exits with 2."""
        assert run("assess", COPUOS, str(tmp_path / "missing.yaml")) == 2

    def test_unified_requires_pack_id(self, tmp_path, leo_cubesat_profile, capsys):
        """Unified inputs must name their pack."""
        path = tmp_path / "nopack.yaml"
        path.write_text(yaml.safe_dump({"profile": leo_cubesat_profile}))
        assert run("unified", str(path)) == 2
        assert "no pack_id" in capsys.readouterr().err

    def test_load_input_rejects_lists(self, tmp_path):
        """Input files must hold a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(AssessmentError):
            load_input(path)

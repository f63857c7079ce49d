"""End-to-end: MRC file in, mesh file out, through the CLI and the runner."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from meshmaker.cli import app
from meshmaker.core.contracts import StageName
from meshmaker.core.errors import StageError
from meshmaker.core.options import parse_args
from meshmaker.core.pipeline import run_pipeline


def _has_pyvista() -> bool:
    try:
        import pyvista
        return True
    except ImportError:
        return False


needs_pyvista = pytest.mark.skipif(not _has_pyvista(), reason="pyvista not installed")

runner = CliRunner()


@needs_pyvista
class TestRunPipeline:
    def test_default_chain(self, tmp_path: Path, sample_map_file: Path):
        prefix = str(tmp_path / "plain")
        config = parse_args(["-c", "0.5", "-o", prefix, str(sample_map_file)])
        result = run_pipeline(config)

        assert result.stage_names == [
            StageName.DECODE, StageName.EXTRACT, StageName.STRIP, StageName.WRITE,
        ]
        assert Path(result.output_path).is_file()
        assert result.output_path == f"{prefix}.vtp"

    def test_smooth_and_decimate(self, tmp_path: Path, sample_map_file: Path):
        config = parse_args([
            "-s", "-i", "10", "-D", "-t", "0.5", "-c", "0.5",
            "-o", str(tmp_path / "full"), "-S", str(sample_map_file),
        ])
        result = run_pipeline(config)

        names = result.stage_names
        assert names.index(StageName.SMOOTH) < names.index(StageName.DECIMATE)
        metas = {meta.stage: meta for meta in result.stages}
        assert metas[StageName.DECIMATE].num_cells < metas[StageName.TRIANGULATE].num_cells
        assert (tmp_path / "full.stl").is_file()

    def test_missing_input_aborts_before_output(self, tmp_path: Path):
        config = parse_args(["-o", str(tmp_path / "never"), str(tmp_path / "missing.map")])
        with pytest.raises(StageError) as excinfo:
            run_pipeline(config)
        assert excinfo.value.stage == "decode"
        assert list(tmp_path.iterdir()) == []


class TestCli:
    def test_help(self):
        result = runner.invoke(app, ["file.map", "--help", "-c", "oops"])
        assert result.exit_code == 0
        assert "usage: meshmaker" in result.output

    def test_short_help(self):
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        assert "--target-reduction" in result.output

    def test_usage_lines_are_not_wrapped(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        long_line = (
            "the prefix of the output file to be combined with the extension (see below) "
            "[default: out]"
        )
        assert long_line in result.output

    def test_configuration_errors_reported_together(self):
        result = runner.invoke(app, ["-c", "abc", "-D", "-t", "1.2"])
        assert result.exit_code == 1
        assert "could not parse 'abc'" in result.output
        assert "Input MAP/MRC file not specified" in result.output
        assert "Target reduction out of range" in result.output

    def test_stage_error_exit_code(self, tmp_path: Path):
        result = runner.invoke(app, ["-o", str(tmp_path / "x"), str(tmp_path / "missing.map")])
        assert result.exit_code == 1
        assert "decode" in result.output

    def test_truncated_map_exit_code(self, tmp_path: Path, sample_map_file: Path):
        sample_map_file.write_bytes(sample_map_file.read_bytes()[:2024])
        prefix = tmp_path / "trunc"
        result = runner.invoke(app, ["-c", "0.5", "-o", str(prefix), str(sample_map_file)])
        assert result.exit_code == 1
        assert "truncated" in result.output
        assert not (tmp_path / "trunc.vtp").exists()

    @needs_pyvista
    def test_writes_stl_with_warning(self, tmp_path: Path, sample_map_file: Path):
        prefix = tmp_path / "cli"
        result = runner.invoke(
            app, ["-c", "0.5", "-o", str(prefix), "-S", "-U", str(sample_map_file)]
        )
        assert result.exit_code == 0, result.output
        assert "Warning" in result.output
        assert (tmp_path / "cli.stl").is_file()

    @needs_pyvista
    def test_verbose_prints_plan(self, tmp_path: Path, sample_map_file: Path):
        result = runner.invoke(
            app, ["-v", "-s", "-c", "0.5", "-o", str(tmp_path / "v"), str(sample_map_file)]
        )
        assert result.exit_code == 0, result.output
        assert "smooth" in result.output
        assert (tmp_path / "v.vtp").is_file()

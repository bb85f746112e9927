from pathlib import Path

from docimport.external import command as cmd


def _make_files(tmp_path: Path) -> cmd.TempFiles:
    return cmd.TempFiles(input=tmp_path / "input-content", output_meta=tmp_path / "output-meta")


class TestSplitCommand:
    def test_string_is_tokenized(self) -> None:
        assert cmd.split_command('app -x "two words" ${INPUT}') == [
            "app",
            "-x",
            "two words",
            "${INPUT}",
        ]

    def test_sequence_is_kept(self) -> None:
        assert cmd.split_command(["app", "${REFERENCE}"]) == ["app", "${REFERENCE}"]


class TestUses:
    def test_detects_argument_placeholder(self) -> None:
        assert cmd.uses(cmd.INPUT, ["app", "-i", "${INPUT}"], {})
        assert not cmd.uses(cmd.OUTPUT, ["app", "-i", "${INPUT}"], {})

    def test_detects_environment_placeholder(self) -> None:
        assert cmd.uses(cmd.OUTPUT_META, ["app"], {"META": "${OUTPUT_META}"})


class TestResolve:
    def test_reference_with_spaces_stays_one_argument(self, tmp_path: Path) -> None:
        reference = "C:\\My Docs\\report one.pdf"
        args, _env = cmd.resolve_all(
            ["app", "-ref", "${REFERENCE}"], {}, reference, _make_files(tmp_path)
        )
        assert args == ["app", "-ref", reference]

    def test_paths_are_substituted(self, tmp_path: Path) -> None:
        files = _make_files(tmp_path)
        args, env = cmd.resolve_all(
            ["app", "--in=${INPUT}"], {"META": "${OUTPUT_META}"}, "ref", files
        )
        assert args == ["app", f"--in={tmp_path / 'input-content'}"]
        assert env == {"META": str(tmp_path / "output-meta")}

    def test_unused_path_resolves_empty(self, tmp_path: Path) -> None:
        assert cmd.resolve("x${OUTPUT}y", "ref", _make_files(tmp_path)) == "xy"

    def test_unknown_placeholders_are_left_alone(self, tmp_path: Path) -> None:
        assert cmd.resolve("${HOME}", "ref", _make_files(tmp_path)) == "${HOME}"

    def test_reference_is_not_reinterpreted(self, tmp_path: Path) -> None:
        assert cmd.resolve("${REFERENCE}", "${INPUT}", _make_files(tmp_path)) == "${INPUT}"

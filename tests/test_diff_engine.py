"""Tests for mirror.diff_engine."""

import logging
from unittest.mock import MagicMock

import pytest

from mirror.diff_engine import (
    describe_result,
    diff_against_local_directory,
    diff_one,
    diff_two_source_sets,
    render_results,
    render_summary,
    summarize_results,
)
from mirror.errors import LocalFileReadError, SourceInvariantError
from mirror.models import (
    ContractSources,
    DiffDiffer,
    DiffError,
    DiffMatch,
    DiffNotFound,
    DiffStatus,
    Side,
)
from utils.file_handler import FileHandler


class TestDiffOne:

    def test_equal_texts_match(self):
        result = diff_one("contract A {}", "contract A {}", path="A.sol")
        assert result == DiffMatch("A.sol")
        assert result.status == DiffStatus.MATCH

    def test_different_texts_carry_unified_diff(self):
        result = diff_one("uint256 a;\nuint256 b;", "uint256 a;\nuint256 c;", path="A.sol")

        assert isinstance(result, DiffDiffer)
        assert result.status == DiffStatus.DIFFER
        assert "--- a/A.sol" in result.diff
        assert "+++ b/A.sol" in result.diff
        assert "-uint256 b;" in result.diff
        assert "+uint256 c;" in result.diff


class TestDiffAgainstLocalDirectory:

    def test_match_differ_and_not_found(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "Same.sol").write_bytes(b"contract Same {}\r\n")
        (tmp_path / "src" / "Changed.sol").write_text("contract Changed { uint a; }\n")

        sources = ContractSources(
            address="0x0",
            sources={
                "src/Same.sol": "\ncontract Same {}",
                "src/Changed.sol": "contract Changed { uint b; }",
                "src/Missing.sol": "contract Missing {}",
            },
        )
        results = diff_against_local_directory(sources, str(tmp_path), None)

        assert [r.path for r in results] == ["src/Same.sol", "src/Changed.sol", "src/Missing.sol"]
        assert results[0] == DiffMatch("src/Same.sol")
        assert isinstance(results[1], DiffDiffer)
        assert "-contract Changed { uint a; }" in results[1].diff
        assert "+contract Changed { uint b; }" in results[1].diff
        assert results[2] == DiffNotFound("src/Missing.sol", expected_path=str(tmp_path / "src" / "Missing.sol"))

    def test_uses_remappings_to_find_dependencies(self, tmp_path):
        dep = tmp_path / "lib" / "openzeppelin-contracts" / "contracts"
        dep.mkdir(parents=True)
        (dep / "Ownable.sol").write_text("abstract contract Ownable {}")

        results = diff_against_local_directory(
            {"@openzeppelin/contracts/Ownable.sol": "abstract contract Ownable {}"},
            str(tmp_path),
            {"@openzeppelin/": "lib/openzeppelin-contracts/"},
        )
        assert results == [DiffMatch("@openzeppelin/contracts/Ownable.sol")]

    def test_absolute_reported_path_does_not_read_outside_root(self, tmp_path):
        outside = tmp_path / "outside.sol"
        outside.write_text("contract Outside {}")
        root = tmp_path / "proj"
        root.mkdir()

        results = diff_against_local_directory({str(outside): "contract Outside {}"}, str(root))

        assert len(results) == 1
        assert results[0].status == DiffStatus.NOT_FOUND
        assert results[0].expected_path.startswith(str(root))

    def test_unreadable_file_becomes_error_result(self, tmp_path, caplog):
        # A directory where a file is expected cannot be read as text
        (tmp_path / "Token.sol").mkdir()

        with caplog.at_level(logging.ERROR, logger="mirror.diff_engine"):
            results = diff_against_local_directory({"Token.sol": "contract Token {}"}, str(tmp_path))

        assert len(results) == 1
        assert isinstance(results[0], DiffError)
        assert results[0].expected_path == str(tmp_path / "Token.sol")
        assert "Token.sol" in caplog.text

    def test_read_error_does_not_stop_the_run(self, tmp_path):
        handler = MagicMock(spec=FileHandler)
        handler.read_file.side_effect = [
            LocalFileReadError("/x/A.sol", PermissionError("denied")),
            "contract B {}",
        ]
        results = diff_against_local_directory(
            {"A.sol": "contract A {}", "B.sol": "contract B {}"}, "/x", file_handler=handler
        )

        assert [r.status for r in results] == [DiffStatus.ERROR, DiffStatus.MATCH]
        assert results[0].reason == "denied"


class TestDiffTwoSourceSets:

    def test_classification_is_symmetric(self):
        a = {"Common.sol": "contract C {}\r\n", "OnlyA.sol": "contract A {}"}
        b = {"OnlyB.sol": "contract B {}", "Common.sol": "contract C {}"}

        results = diff_two_source_sets(a, b)
        assert results == [
            DiffMatch("Common.sol"),
            DiffNotFound("OnlyA.sol", expected_path="OnlyA.sol", side=Side.B),
            DiffNotFound("OnlyB.sol", expected_path="OnlyB.sol", side=Side.A),
        ]

        reverse = diff_two_source_sets(b, a)
        assert DiffNotFound("OnlyB.sol", expected_path="OnlyB.sol", side=Side.B) in reverse
        assert DiffNotFound("OnlyA.sol", expected_path="OnlyA.sol", side=Side.A) in reverse
        assert DiffMatch("Common.sol") in reverse

    def test_differing_content(self):
        results = diff_two_source_sets({"A.sol": "x = 1"}, {"A.sol": "x = 2"})
        assert isinstance(results[0], DiffDiffer)
        assert "--- A/A.sol" in results[0].diff

    def test_accepts_contract_sources(self):
        a = ContractSources(address="0xa", sources={"A.sol": "x"})
        b = ContractSources(address="0xb", sources={"A.sol": "x"})
        assert diff_two_source_sets(a, b) == [DiffMatch("A.sol")]

    def test_non_string_content_is_an_invariant_violation(self):
        with pytest.raises(SourceInvariantError):
            diff_two_source_sets({"A.sol": None}, {"A.sol": "x"})


class TestSummary:

    def _results(self):
        return [
            DiffMatch("A.sol"),
            DiffMatch("B.sol"),
            DiffDiffer("C.sol", diff="..."),
            DiffNotFound("D.sol", expected_path="/p/D.sol"),
        ]

    def test_counts_by_status(self):
        summary = summarize_results(self._results())

        assert summary.total == 4
        assert summary.count(DiffStatus.MATCH) == 2
        assert summary.count(DiffStatus.DIFFER) == 1
        assert summary.count(DiffStatus.NOT_FOUND) == 1
        assert summary.count(DiffStatus.ERROR) == 0
        assert summary.success is False

    def test_zero_counts_are_omitted(self):
        lines = render_summary(summarize_results(self._results()))
        assert lines == [
            "2 file(s) matched.",
            "1 file(s) had differences.",
            "1 file(s) were not found.",
        ]

    def test_success_only_when_everything_matches(self):
        assert summarize_results([DiffMatch("A.sol"), DiffMatch("B.sol")]).success
        assert not summarize_results(self._results()).success
        assert summarize_results([]).success

    def test_render_results_inlines_diffs(self):
        text = render_results(self._results())

        assert "[MATCH] A.sol" in text
        assert "[DIFF]  C.sol\n..." in text
        assert "[NOT FOUND] D.sol\n  > Expected at: /p/D.sol" in text
        assert text.endswith("1 file(s) were not found.")

    def test_describe_error_and_side(self):
        assert describe_result(DiffError("E.sol", expected_path="/p/E.sol", reason="denied")) == [
            "[ERROR] E.sol",
            "  > Could not read /p/E.sol: denied",
        ]
        assert describe_result(DiffNotFound("F.sol", expected_path="F.sol", side=Side.A))[1] == (
            "  > Missing from source set A"
        )

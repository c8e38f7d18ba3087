"""End-to-end runs of the samtofasta command over real SAM and FASTA files."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from samtofasta.cli_entry import cli

REFERENCE = ">chr1 test contig\nACGTACGTAC\n>chr3\nGGGGCCCC\n"

HEADER = "@HD\tVN:1.6\tSO:unsorted\n@SQ\tSN:chr1\tLN:10\n@SQ\tSN:chr2\tLN:10\n@SQ\tSN:chr3\tLN:20\n"


def _sam_line(name, flag, rname, pos, cigar, seq):
    return f"{name}\t{flag}\t{rname}\t{pos}\t60\t{cigar}\t*\t0\t0\t{seq}\t*\n"


READS = [
    _sam_line("match", 0, "chr1", 3, "4M", "GTAC"),
    _sam_line("insertion", 0, "chr1", 1, "4M2I4M", "ACGTNNACGT"),
    _sam_line("deletion", 0, "chr1", 1, "4M2D2M", "ACGTAC"),
    _sam_line("softclip", 0, "chr1", 5, "3S4M", "NNNACGT"),
    _sam_line("unmapped", 4, "*", 0, "*", "ACGT"),
    _sam_line("other_contig", 0, "chr2", 1, "4M", "ACGT"),
    _sam_line("no_sequence", 0, "chr1", 1, "4M", "*"),
    _sam_line("hardclip", 0, "chr3", 2, "3H4M", "GGGC"),
]


def _write_inputs(tmp_path: Path, reads, sam_name="reads.sam"):
    sam = tmp_path / sam_name
    sam.write_text(HEADER + "".join(reads))
    ref = tmp_path / "ref.fa"
    ref.write_text(REFERENCE)
    return sam, ref


def _run(tmp_path, sam, ref, *extra):
    out = tmp_path / "aligned.fa"
    result = CliRunner().invoke(
        cli,
        ["--input", str(sam), "--ref", str(ref), "--output", str(out), "--samtools-backend", "python", *extra],
    )
    return result, out


@pytest.mark.e2e
def test_cli_writes_gapped_pairs(tmp_path):
    sam, ref = _write_inputs(tmp_path, READS)

    result, out = _run(tmp_path, sam, ref)

    assert result.exit_code == 0, result.output
    assert out.read_text().splitlines() == [
        ">chr1", "GTAC", ">match", "GTAC",
        ">chr1", "ACGT--ACGT", ">insertion", "ACGTNNACGT",
        ">chr1", "ACGTACGT", ">deletion", "ACGT--AC",
        ">chr1", "ACGT", ">softclip", "ACGT",
        ">chr3", "GGGC", ">hardclip", "GGGC",
    ]


@pytest.mark.e2e
def test_cli_full_reference(tmp_path):
    sam, ref = _write_inputs(tmp_path, READS[:1])

    result, out = _run(tmp_path, sam, ref, "-f")

    assert result.exit_code == 0, result.output
    assert out.read_text() == ">chr1\nACGTACGTAC\n>match\n--GTAC----\n"


@pytest.mark.e2e
def test_cli_unsupported_operation_aborts(tmp_path):
    reads = [
        _sam_line("first", 0, "chr1", 1, "4M", "ACGT"),
        _sam_line("spliced", 0, "chr1", 1, "2M2N2M", "ACGT"),
        _sam_line("after", 0, "chr1", 1, "4M", "ACGT"),
    ]
    sam, ref = _write_inputs(tmp_path, reads)

    result, out = _run(tmp_path, sam, ref)

    assert result.exit_code != 0
    assert "Unsupported CIGAR operation 'N'" in result.output
    assert ">after" not in out.read_text()


@pytest.mark.e2e
def test_cli_reference_overrun_aborts(tmp_path):
    reads = [_sam_line("overrun", 0, "chr3", 6, "4M", "CCCC")]
    sam, ref = _write_inputs(tmp_path, reads)

    result, _ = _run(tmp_path, sam, ref)

    assert result.exit_code != 0
    assert "past the end" in result.output


@pytest.mark.e2e
def test_cli_rejects_bam(tmp_path):
    bam = tmp_path / "reads.BAM"
    bam.write_bytes(b"BAM\x01")
    ref = tmp_path / "ref.fa"
    ref.write_text(REFERENCE)

    result, _ = _run(tmp_path, bam, ref)

    assert result.exit_code != 0
    assert "Not supported yet" in result.output


@pytest.mark.e2e
def test_cli_rejects_unknown_extension(tmp_path):
    sam, ref = _write_inputs(tmp_path, READS[:1], sam_name="reads.txt")

    result, _ = _run(tmp_path, sam, ref)

    assert result.exit_code != 0
    assert "ending with .sam or .bam" in result.output


@pytest.mark.e2e
def test_cli_requires_arguments(tmp_path):
    result = CliRunner().invoke(cli, ["--output", str(tmp_path / "out.fa")])

    assert result.exit_code != 0
    assert "Missing option" in result.output


@pytest.mark.e2e
def test_cli_missing_input_file(tmp_path):
    ref = tmp_path / "ref.fa"
    ref.write_text(REFERENCE)

    result, _ = _run(tmp_path, tmp_path / "missing.sam", ref)

    assert result.exit_code != 0
    assert "does not exist" in result.output


@pytest.mark.e2e
def test_cli_uncreatable_output(tmp_path):
    sam, ref = _write_inputs(tmp_path, READS[:1])
    out = tmp_path / "no_such_dir" / "aligned.fa"

    result = CliRunner().invoke(
        cli, ["-i", str(sam), "-r", str(ref), "-o", str(out), "--samtools-backend", "python"]
    )

    assert result.exit_code != 0
    assert not out.exists()


@pytest.mark.e2e
def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert result.output.startswith("samtofasta, version")


@pytest.mark.e2e
@pytest.mark.parametrize("header", ["", "@HD\tVN:1.6\tSO:unsorted\n"], ids=["no_header", "hd_only"])
def test_cli_reads_sam_without_sq_lines(tmp_path, header):
    sam = tmp_path / "reads.sam"
    sam.write_text(header + _sam_line("read1", 0, "chr1", 1, "4M", "ACGT"))
    ref = tmp_path / "ref.fa"
    ref.write_text(">chr1\nACGTACGT\n")

    result, out = _run(tmp_path, sam, ref)

    assert result.exit_code == 0, result.output
    assert out.read_text() == ">chr1\nACGT\n>read1\nACGT\n"

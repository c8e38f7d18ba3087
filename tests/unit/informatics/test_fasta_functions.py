import pytest

from samtofasta.errors import ReferenceReadError
from samtofasta.informatics.fasta_functions import ReferenceStore, load_reference_sequences


def test_load_reference_sequences_keeps_names_and_case(tmp_path):
    fasta = tmp_path / "ref.fa"
    fasta.write_text(">chr1 first contig\nACGT\nacgt\n>chr2\nTTTTGGGG\n")

    sequences = load_reference_sequences(fasta)

    assert sequences == {"chr1": "ACGTacgt", "chr2": "TTTTGGGG"}


def test_load_reference_sequences_last_duplicate_wins(tmp_path):
    fasta = tmp_path / "ref.fa"
    fasta.write_text(">chr1\nAAAA\n>chr1\nCCCC\n")

    assert load_reference_sequences(fasta) == {"chr1": "CCCC"}


def test_load_reference_sequences_missing_file(tmp_path):
    with pytest.raises(ReferenceReadError, match="Could not open reference"):
        load_reference_sequences(tmp_path / "missing.fa")


def test_load_reference_sequences_directory(tmp_path):
    with pytest.raises(ReferenceReadError):
        load_reference_sequences(tmp_path)


def test_reference_store_is_read_only(tmp_path):
    fasta = tmp_path / "ref.fa"
    fasta.write_text(">chr1\nACGT\n>chr2\nGG\n")

    store = ReferenceStore.from_fasta(fasta)

    assert len(store) == 2
    assert "chr1" in store
    assert "chr3" not in store
    assert store["chr2"] == "GG"
    assert store.get("chr3") is None
    assert store.get(None) is None
    assert sorted(store) == ["chr1", "chr2"]
    with pytest.raises(TypeError):
        store.sequences["chr1"] = "TTTT"


def test_reference_store_copies_its_input():
    source = {"chr1": "ACGT"}
    store = ReferenceStore(source)
    source["chr1"] = "TTTT"

    assert store["chr1"] == "ACGT"

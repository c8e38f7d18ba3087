"""Test suite configuration and marker guidance.

Use ``pytest -m smoke`` for rapid feedback on imports.
Use ``pytest -m unit`` for fast feedback on unit tests.
Use ``pytest -m e2e`` to run the command line end to end over small SAM/FASTA files (needs pysam).
Use ``pytest`` to run everything.
"""

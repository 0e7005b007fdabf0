"""
Document builders for the "other" indexes (probes, sequences, references,
antibodies and the other object types that are only found by ID) and for
the non-ID token index.
"""
from whoosh.fields import ID, STORED, TEXT, Schema

from searchtool_indexer.docbuilder.base import AbstractDocBuilder, ExactDocBuilder
from searchtool_indexer.indexer.analysis import TOKEN_ANALYZER


class OtherExactDocBuilder(ExactDocBuilder):

    FIELDS = ('db_key', 'data', 'raw_data', 'accession_key', 'data_type',
              'preferred', 'provider', 'display_type')

    SCHEMA = Schema(
        data=ID(stored=True),
        raw_data=STORED,
        accession_key=STORED,
        data_type=ID(stored=True),
        db_key=STORED,
        preferred=STORED,
        provider=STORED,
        display_type=STORED,
    )


class OtherDisplayDocBuilder(AbstractDocBuilder):

    FIELDS = ('db_key', 'data_type', 'name', 'qualifier')

    SCHEMA = Schema(
        data_type=ID(stored=True),
        name=STORED,
        db_key=ID(stored=True),
        qualifier=STORED,
    )


class NonIDTokenDocBuilder(AbstractDocBuilder):
    """Free text, split on whitespace only, so the index lists every large token."""

    FIELDS = ('data',)

    SCHEMA = Schema(
        data=TEXT(analyzer=TOKEN_ANALYZER, stored=True),
    )

"""
Document builders for the genome feature (marker and allele) indexes.
"""
from whoosh.fields import ID, STORED, TEXT, Schema

from searchtool_indexer.docbuilder.base import AbstractDocBuilder, ExactDocBuilder, InexactDocBuilder
from searchtool_indexer.indexer.analysis import MGI_ANALYZER, STEMMED_MGI_ANALYZER


class GenomeFeatureExactDocBuilder(ExactDocBuilder):
    """Whole labels (names, synonyms, orthologs) for the genome feature exact index."""

    FIELDS = ('db_key', 'data', 'raw_data', 'data_type', 'display_type',
              'provider', 'unique_key')

    SCHEMA = Schema(
        data=ID(stored=True),
        raw_data=STORED,
        data_type=ID(stored=True),
        db_key=ID(stored=True),
        display_type=STORED,
        provider=STORED,
        unique_key=ID(stored=True),
    )


class GenomeFeatureSymbolDocBuilder(ExactDocBuilder):
    """Current and old symbols for the genome feature symbol index."""

    FIELDS = ('db_key', 'data', 'raw_data', 'data_type', 'display_type', 'unique_key')

    SCHEMA = Schema(
        data=ID(stored=True),
        raw_data=STORED,
        data_type=ID(stored=True),
        db_key=ID(stored=True),
        display_type=STORED,
        unique_key=ID(stored=True),
    )


class GenomeFeatureAccIDDocBuilder(ExactDocBuilder):
    """Accession IDs for the genome feature accession ID index."""

    FIELDS = ('db_key', 'data', 'raw_data', 'data_type', 'display_type', 'provider')

    SCHEMA = Schema(
        data=ID(stored=True),
        raw_data=STORED,
        data_type=ID(stored=True),
        db_key=ID(stored=True),
        provider=ID(stored=True),
        display_type=STORED,
    )


class GenomeFeatureInexactDocBuilder(InexactDocBuilder):
    """Small tokens of labels for the genome feature inexact index."""

    FIELDS = ('db_key', 'data', 'raw_data', 'sdata', 'data_type', 'is_current',
              'organism', 'object_type', 'display_type', 'unique_key')

    SCHEMA = Schema(
        db_key=ID(stored=True),
        data=TEXT(analyzer=MGI_ANALYZER, stored=True),
        sdata=TEXT(analyzer=STEMMED_MGI_ANALYZER, stored=True),
        raw_data=STORED,
        data_type=ID(stored=True),
        is_current=STORED,
        organism=TEXT(stored=True),
        object_type=ID(stored=True),
        display_type=STORED,
        unique_key=ID(stored=True),
    )


class GenomeFeatureDisplayDocBuilder(AbstractDocBuilder):
    """One display document per marker or allele, looked up by db_key."""

    FIELDS = ('db_key', 'symbol', 'name', 'chromosome', 'marker_type',
              'mgi_id', 'strand', 'location_display', 'object_type',
              'batch_value')

    SCHEMA = Schema(
        db_key=ID(stored=True),
        symbol=ID(stored=True),
        name=ID(stored=True),
        chromosome=STORED,
        marker_type=ID(stored=True),
        mgi_id=ID(stored=True),
        strand=ID(stored=True),
        location_display=ID(stored=True),
        object_type=ID(stored=True),
        batch_value=ID(stored=True),
    )

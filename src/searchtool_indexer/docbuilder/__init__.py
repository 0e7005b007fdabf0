from searchtool_indexer.docbuilder.base import AbstractDocBuilder, ExactDocBuilder, InexactDocBuilder
from searchtool_indexer.docbuilder.genome_feature import (
    GenomeFeatureAccIDDocBuilder,
    GenomeFeatureDisplayDocBuilder,
    GenomeFeatureExactDocBuilder,
    GenomeFeatureInexactDocBuilder,
    GenomeFeatureSymbolDocBuilder,
)
from searchtool_indexer.docbuilder.other import NonIDTokenDocBuilder, OtherDisplayDocBuilder, OtherExactDocBuilder
from searchtool_indexer.docbuilder.vocab import (
    GenomeFeatureVocabAccIDDocBuilder,
    GenomeFeatureVocabDagDocBuilder,
    GenomeFeatureVocabExactDocBuilder,
    VocabAccIDDocBuilder,
    VocabDisplayDocBuilder,
    VocabExactDocBuilder,
    VocabInexactDocBuilder,
)

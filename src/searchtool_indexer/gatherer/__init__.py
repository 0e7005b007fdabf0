"""
Gatherers, keyed by the index code given on the command line.
"""
from searchtool_indexer.gatherer.base import AbstractGatherer, DatabaseGatherer
from searchtool_indexer.gatherer.genome_feature import (
    GenomeFeatureAccIDGatherer,
    GenomeFeatureDisplayGatherer,
    GenomeFeatureExactGatherer,
    GenomeFeatureInexactGatherer,
    GenomeFeatureSymbolGatherer,
)
from searchtool_indexer.gatherer.genome_feature_vocab import (
    GenomeFeatureVocabAccIDGatherer,
    GenomeFeatureVocabDagGatherer,
    GenomeFeatureVocabExactGatherer,
)
from searchtool_indexer.gatherer.non_id_token import NonIDTokenGatherer
from searchtool_indexer.gatherer.other import OtherDisplayGatherer, OtherExactGatherer
from searchtool_indexer.gatherer.vocab import (
    VocabAccIDGatherer,
    VocabDisplayGatherer,
    VocabExactGatherer,
    VocabInexactGatherer,
)

GATHERERS = {
    'g': GenomeFeatureInexactGatherer,
    'ge': GenomeFeatureExactGatherer,
    'ga': GenomeFeatureAccIDGatherer,
    'gs': GenomeFeatureSymbolGatherer,
    'gd': GenomeFeatureDisplayGatherer,
    'gva': GenomeFeatureVocabAccIDGatherer,
    'gve': GenomeFeatureVocabExactGatherer,
    'gvd': GenomeFeatureVocabDagGatherer,
    'v': VocabInexactGatherer,
    've': VocabExactGatherer,
    'va': VocabAccIDGatherer,
    'vd': VocabDisplayGatherer,
    't': NonIDTokenGatherer,
    'o': OtherExactGatherer,
    'od': OtherDisplayGatherer,
}

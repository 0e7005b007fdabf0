"""
Tests for the gatherers. The vocabulary gatherers run against a small sqlite
database; the others get their rows from a mocked SQL executor.
"""
import os
import shutil
import sqlite3
import tempfile
import unittest
from unittest.mock import Mock

from mgd_fixture import create_mgd_database

from searchtool_indexer.common.config import IndexCfg
from searchtool_indexer.gatherer import GATHERERS
from searchtool_indexer.gatherer.base import AbstractGatherer
from searchtool_indexer.gatherer.genome_feature import (
    ALLELE_LABEL_QUERY,
    MARKER_DISPLAY_QUERY,
    MARKER_LABEL_QUERY,
    GenomeFeatureDisplayGatherer,
    GenomeFeatureExactGatherer,
    GenomeFeatureSymbolGatherer,
    location_display,
)
from searchtool_indexer.gatherer.genome_feature_vocab import annotation_display_type
from searchtool_indexer.gatherer.non_id_token import NonIDTokenGatherer
from searchtool_indexer.gatherer.other import OTHER_ACCID_QUERY, OtherExactGatherer
from searchtool_indexer.gatherer.vocab import is_omim_id
from searchtool_indexer.indexer.document_stack import END_OF_STREAM, SharedDocumentStack


def collect(stack):
    docs = []
    while True:
        batch = stack.pop_many(100)
        if batch is END_OF_STREAM:
            return docs
        docs.extend(dict(doc) for doc in batch)


def mocked_executor(results):
    """SQL executor whose execute returns canned rows per query."""
    executor = Mock()
    executor.timing = 0

    def execute(query, params=()):
        result = results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return iter(result)

    executor.execute.side_effect = execute
    return executor


MARKER_LABELS = [
    {'_Marker_key': 1, 'label': 'Kit', 'labelType': 'MS', 'labelTypeName': 'current symbol',
     '_Label_Status_key': 1, 'organism': 'mouse'},
    {'_Marker_key': 1, 'label': 'kit oncogene', 'labelType': 'MN', 'labelTypeName': 'current name',
     '_Label_Status_key': 1, 'organism': 'mouse'},
    {'_Marker_key': 1, 'label': 'SCO1', 'labelType': 'MY', 'labelTypeName': 'synonym',
     '_Label_Status_key': 1, 'organism': 'mouse'},
]

ALLELE_LABELS = [
    {'_Allele_key': 9, 'label': 'Kit<W>', 'labelType': 'AS', 'labelTypeName': 'allele symbol',
     '_Label_Status_key': 1},
    {'_Allele_key': 9, 'label': 'dominant white spotting', 'labelType': 'AN',
     'labelTypeName': 'allele name', '_Label_Status_key': 1},
]


class GathererTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.db_path = create_mgd_database(os.path.join(self.tmp_dir, 'mgd.db'))
        self.config = IndexCfg(overrides={'MGD_DB_PATH': self.db_path}, environ={})
        self.stack = SharedDocumentStack(backoff_start=0.01, backoff_ceiling=0.05)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def run_gatherer(self, code):
        gatherer = GATHERERS[code](self.config, self.stack)
        gatherer.run()
        return gatherer, collect(self.stack)


class TestVocabGatherers(GathererTestCase):
    def test_vocab_exact(self):
        gatherer, docs = self.run_gatherer('ve')

        self.assertEqual(gatherer.failed_subtasks, [])
        self.assertEqual(gatherer.pushed, len(docs))
        by_type = {}
        for doc in docs:
            by_type.setdefault(doc['data_type'], []).append(doc)

        terms = sorted(doc['data'] for doc in by_type['vT'])
        self.assertEqual(terms, ['abnormal heart', 'c57bl/6j', 'cancer', 'heart dilation'])
        self.assertEqual(sorted(doc['data'] for doc in by_type['vS']), ['b6', 'cardiac abnormality'])

        strain = [doc for doc in by_type['vT'] if doc['vocabulary'] == 'Strain'][0]
        self.assertEqual(strain['db_key'], 'Strain10')
        self.assertEqual(strain['raw_data'], 'C57BL/6J')

        # Definitions are glued back together, one document per term
        notes = {doc['db_key']: doc for doc in by_type['vN']}
        self.assertEqual(sorted(notes), ['2', '4'])
        self.assertEqual(notes['2']['raw_data'], 'Enlargement of the heart.')
        self.assertEqual(notes['2']['data'], 'enlargement of the heart.')
        self.assertEqual(notes['2']['vocabulary'], 'MP')
        self.assertEqual(notes['2']['display_type'], 'Definition')

    def test_vocab_inexact(self):
        _, docs = self.run_gatherer('v')
        heart = [doc for doc in docs if doc.get('raw_data') == 'Abnormal heart'][0]
        self.assertEqual(heart['sdata'], 'Abnormal heart')
        strain = [doc for doc in docs if doc.get('raw_data') == 'C57BL/6J'][0]
        self.assertEqual(strain['data'], 'C57BL 6J')

    def test_vocab_accession_ids(self):
        _, docs = self.run_gatherer('va')
        by_id = {doc['raw_data']: doc for doc in docs}

        self.assertEqual(sorted(by_id), ['114480', 'DOID:162', 'MGI:3028467', 'MP:0000001'])
        self.assertEqual(by_id['114480']['provider'], '(OMIM)')
        self.assertNotIn('provider', by_id['DOID:162'])
        self.assertEqual(by_id['MGI:3028467']['db_key'], 'Strain10')
        self.assertEqual(by_id['MP:0000001']['data'], 'mp:0000001')

    def test_vocab_display(self):
        _, docs = self.run_gatherer('vd')
        by_key = {doc['db_key']: doc for doc in docs}

        self.assertEqual(sorted(by_key), ['1', '2', '4'])
        self.assertEqual(by_key['1']['child_ids'], 'MP:0000002')
        self.assertEqual(by_key['1']['annotation_count'], '2')
        self.assertEqual(by_key['1']['contents'], 'Abnormal heart')
        self.assertEqual(by_key['1']['vocabulary'], 'MP')
        self.assertNotIn('child_ids', by_key['2'])

    def test_missing_database_still_completes(self):
        self.config = IndexCfg(overrides={'MGD_DB_PATH': os.path.join(self.tmp_dir, 'missing.db')},
                               environ={})
        with self.assertLogs('searchtool_indexer.gatherer.base', level='ERROR'):
            gatherer, docs = self.run_gatherer('ve')

        self.assertEqual(docs, [])
        self.assertTrue(self.stack.is_complete())
        self.assertEqual(gatherer.failed_subtasks, ['do_vocab_term', 'do_vocab_synonym', 'do_vocab_note'])
        self.assertFalse(os.path.exists(os.path.join(self.tmp_dir, 'missing.db')))

    def test_aborted_stack_stops_the_gatherer(self):
        with self.assertLogs('searchtool_indexer', level='WARNING') as logs:
            self.stack.abort()
            gatherer, docs = self.run_gatherer('ve')

        self.assertEqual(docs, [])
        self.assertEqual(gatherer.pushed, 0)
        self.assertEqual(gatherer.failed_subtasks, [])
        self.assertIsNone(gatherer.executor.conn)
        self.assertTrue(any('document stack was aborted' in line for line in logs.output))

    def test_connection_closed_after_run(self):
        gatherer, _ = self.run_gatherer('va')
        self.assertIsNone(gatherer.executor.conn)

    def test_is_omim_id(self):
        self.assertTrue(is_omim_id('Disease Ontology', 15, '114480'))
        self.assertFalse(is_omim_id('Disease Ontology', 15, 'DOID:162'))
        self.assertFalse(is_omim_id('Disease Ontology', 191, '114480'))
        self.assertFalse(is_omim_id('Mammalian Phenotype', 15, '114480'))


class TestGenomeFeatureVocabGatherers(GathererTestCase):
    def test_exact_takes_annotated_terms_only(self):
        gatherer, docs = self.run_gatherer('gve')
        self.assertEqual(gatherer.failed_subtasks, [])

        terms = sorted((doc['db_key'], doc['vocabulary']) for doc in docs if doc['data_type'] == 'vT')
        # Obsolete term 3 and term 5, from a vocabulary that isn't searched, are left out
        self.assertEqual(terms, [('1', 'MP'), ('2', 'MP'), ('4', 'Disease Ontology'), ('4', 'Disease Ortholog')])
        self.assertEqual(len(docs), 8)

        heart = [doc for doc in docs if doc['raw_data'] == 'Abnormal heart'][0]
        self.assertEqual(heart['display_type'], 'Phenotype')
        self.assertEqual(heart['unique_key'], '1Mammalian Phenotype')

        synonym = [doc for doc in docs if doc['data_type'] == 'vS'][0]
        self.assertEqual(synonym['data'], 'cardiac abnormality')
        self.assertEqual(synonym['unique_key'], '1001vSMammalian Phenotype')

    def test_exact_definitions_per_vocabulary(self):
        _, docs = self.run_gatherer('gve')
        notes = {doc['unique_key']: doc for doc in docs if doc['data_type'] == 'vN'}

        self.assertEqual(sorted(notes), ['2vNMammalian Phenotype', '4vNDisease Ontology', '4vNDisease Ortholog'])
        self.assertEqual(notes['2vNMammalian Phenotype']['raw_data'], 'Enlargement of the heart.')
        self.assertEqual(notes['4vNDisease Ortholog']['display_type'], 'Disease Ortholog')
        self.assertEqual(notes['4vNDisease Ontology']['display_type'], 'Disease Model')

    def test_accession_ids_include_secondary_ids(self):
        _, docs = self.run_gatherer('gva')
        ids = sorted((doc['raw_data'], doc['provider'], doc['vocabulary']) for doc in docs)

        self.assertEqual(ids, [
            ('Abnormal heart', '(MP:0000001)', 'MP'),
            ('cancer', '(114480)', 'Disease Ontology'),
            ('cancer', '(114480)', 'Disease Ortholog'),
            ('cancer', '(DOID:162)', 'Disease Ontology'),
            ('cancer', '(DOID:162)', 'Disease Ortholog'),
            ('heart dilation', '(MP:0000002)', 'MP'),
        ])
        doid = [doc for doc in docs if doc['provider'] == '(DOID:162)'][0]
        self.assertEqual(doid['data'], 'doid:162')
        self.assertEqual(doid['data_type'], 'acc')
        self.assertEqual(doid['db_key'], '4')

    def test_dag_documents_per_object_type(self):
        _, docs = self.run_gatherer('gvd')
        by_key = {doc['unique_key']: doc for doc in docs}

        self.assertEqual(sorted(by_key), [
            '1Mammalian PhenotypeALLELE',
            '1Mammalian PhenotypeMARKER',
            '2Mammalian PhenotypeMARKER',
            '4Disease OntologyMARKER',
            '4Disease OrthologMARKER',
        ])
        marker = by_key['1Mammalian PhenotypeMARKER']
        self.assertEqual(marker['gene_ids'], '20,21')
        # Term 3 is a descendant too, but obsolete
        self.assertEqual(marker['child_ids'], '2')
        self.assertEqual(marker['acc_id'], 'MP:0000001')
        self.assertEqual(marker['object_type'], 'MARKER')

        allele = by_key['1Mammalian PhenotypeALLELE']
        self.assertEqual(allele['gene_ids'], '40')
        self.assertNotIn('child_ids', allele)

        # Human marker annotations stay with the ortholog document
        self.assertEqual(by_key['4Disease OntologyMARKER']['gene_ids'], '20')
        self.assertEqual(by_key['4Disease OrthologMARKER']['gene_ids'], '30')

    def test_unknown_vocabulary_has_no_display_type(self):
        self.assertEqual(annotation_display_type('GO'), 'Function')
        self.assertIsNone(annotation_display_type('Other Vocabulary'))


class TestGenomeFeatureGatherers(GathererTestCase):
    def make_gatherer(self, gatherer_class, results):
        gatherer = gatherer_class(self.config, self.stack)
        gatherer.executor = mocked_executor(results)
        return gatherer

    def test_exact_skips_symbols(self):
        gatherer = self.make_gatherer(GenomeFeatureExactGatherer, {
            MARKER_LABEL_QUERY: MARKER_LABELS,
            ALLELE_LABEL_QUERY: ALLELE_LABELS,
        })
        gatherer.run()
        docs = collect(self.stack)

        self.assertEqual(sorted(doc['raw_data'] for doc in docs),
                         ['SCO1', 'dominant white spotting', 'kit oncogene'])
        name = [doc for doc in docs if doc['raw_data'] == 'kit oncogene'][0]
        self.assertEqual(name['data_type'], 'mN')
        self.assertEqual(name['provider'], 'MARKER')
        self.assertEqual(name['unique_key'], '1kit oncogenemN')

    def test_symbols_only(self):
        gatherer = self.make_gatherer(GenomeFeatureSymbolGatherer, {
            MARKER_LABEL_QUERY: MARKER_LABELS,
            ALLELE_LABEL_QUERY: ALLELE_LABELS,
        })
        gatherer.run()
        docs = collect(self.stack)
        self.assertEqual(sorted(doc['data'] for doc in docs), ['kit', 'kit<w>'])

    def test_failed_subtask_does_not_stop_the_rest(self):
        gatherer = self.make_gatherer(GenomeFeatureExactGatherer, {
            MARKER_LABEL_QUERY: sqlite3.OperationalError('no such table: MRK_Label'),
            ALLELE_LABEL_QUERY: ALLELE_LABELS,
        })
        with self.assertLogs('searchtool_indexer.gatherer.base', level='ERROR'):
            gatherer.run()
        docs = collect(self.stack)

        self.assertEqual(gatherer.failed_subtasks, ['do_marker_labels'])
        self.assertEqual([doc['raw_data'] for doc in docs], ['dominant white spotting'])
        gatherer.executor.cleanup.assert_called_once()

    def test_display_location(self):
        gatherer = self.make_gatherer(GenomeFeatureDisplayGatherer, {
            MARKER_DISPLAY_QUERY: [{
                '_Marker_key': 1, 'symbol': 'Kit', 'name': 'kit oncogene', 'chromosome': '5',
                'markerType': 'Gene', 'accID': 'MGI:96677', 'strand': '+',
                'startCoordinate': 75735647.0, 'endCoordinate': 75817382.0,
            }],
        })
        gatherer.run()
        docs = collect(self.stack)

        self.assertEqual(len(docs), 1)
        self.assertEqual(docs[0]['location_display'], 'Chr5:75735647-75817382')
        self.assertEqual(docs[0]['batch_value'], 'MGI:96677')

    def test_location_display(self):
        self.assertEqual(location_display('X', None, None), 'ChrX')
        self.assertEqual(location_display(None, 1, 2), '')
        self.assertEqual(location_display('1', 10, 20), 'Chr1:10-20')


class TestOtherGatherers(GathererTestCase):
    def test_non_id_tokens_strip_allele_brackets(self):
        rows = MARKER_LABELS + [dict(ALLELE_LABELS[0], _Marker_key=1)]
        gatherer = NonIDTokenGatherer(self.config, self.stack)
        gatherer.executor = mocked_executor({MARKER_LABEL_QUERY: rows})
        gatherer.run()
        docs = collect(self.stack)

        tokens = sorted(doc['data'] for doc in docs)
        self.assertEqual(tokens, ['Kit', 'Kit<W>', 'KitW', 'SCO1', 'kit oncogene'])

    def test_unknown_object_types_are_skipped(self):
        gatherer = OtherExactGatherer(self.config, self.stack)
        self.assertEqual([task.__name__ for task in gatherer.subtasks()], ['do_other_accession_ids'])

        gatherer.executor = mocked_executor({OTHER_ACCID_QUERY: [
            {'_Accession_key': 1, '_Object_key': 7, '_MGIType_key': 3, 'accID': 'MGI:1',
             'preferred': 1, 'logicalDB': 'MGI'},
            {'_Accession_key': 2, '_Object_key': 8, '_MGIType_key': 99, 'accID': 'X:2',
             'preferred': 1, 'logicalDB': 'Other'},
        ]})
        with self.assertLogs('searchtool_indexer.gatherer.other', level='WARNING'):
            gatherer.run()
        docs = collect(self.stack)

        self.assertEqual(len(docs), 1)
        self.assertEqual(docs[0]['data_type'], 'PROBE')
        self.assertEqual(docs[0]['display_type'], 'Probe ID')
        self.assertEqual(docs[0]['data'], 'mgi:1')


class TestAbstractGatherer(unittest.TestCase):
    def test_push_waits_for_capacity(self):
        stack = Mock()
        gatherer = GATHERERS['t'](IndexCfg(overrides={'STACK_MAX': 5}, environ={}), stack)
        gatherer.push({'data': 'x'})

        stack.wait_for_capacity.assert_called_once_with(5)
        stack.push.assert_called_once_with({'data': 'x'})
        self.assertEqual(gatherer.pushed, 1)

    def test_subtasks_must_be_defined(self):
        stack = Mock()
        gatherer = AbstractGatherer(IndexCfg(environ={}), stack)
        with self.assertLogs('searchtool_indexer.gatherer.base', level='ERROR'):
            gatherer.run()
        stack.set_complete.assert_called_once()

    def test_registry(self):
        self.assertEqual(sorted(GATHERERS),
                         ['g', 'ga', 'gd', 'ge', 'gs', 'gva', 'gvd', 'gve',
                          'o', 'od', 't', 'v', 'va', 'vd', 've'])
        for gatherer_class in GATHERERS.values():
            self.assertIsNotNone(gatherer_class.schema())


if __name__ == '__main__':
    unittest.main()

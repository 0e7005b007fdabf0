"""
Gatherers for the genome feature (marker and allele) indexes.
"""
import logging

from searchtool_indexer.common import constants
from searchtool_indexer.docbuilder import (
    GenomeFeatureAccIDDocBuilder,
    GenomeFeatureDisplayDocBuilder,
    GenomeFeatureExactDocBuilder,
    GenomeFeatureInexactDocBuilder,
    GenomeFeatureSymbolDocBuilder,
)
from searchtool_indexer.gatherer.base import DatabaseGatherer

logger = logging.getLogger(__name__)

# Withdrawn markers are never indexed.
MARKER_WITHDRAWN = 2

MARKER_LABEL_QUERY = f"""
    select ml._Marker_key, ml.label, ml.labelType, ml.labelTypeName,
        ml._Label_Status_key, coalesce(o.commonName, 'mouse') as organism
    from MRK_Label ml
    inner join MRK_Marker m on (ml._Marker_key = m._Marker_key)
    left outer join MGI_Organism o on (ml._OrthologOrganism_key = o._Organism_key)
    where m._Marker_Status_key != {MARKER_WITHDRAWN}
"""

ALLELE_LABEL_QUERY = """
    select al._Allele_key, al.label, al.labelType, al.labelTypeName,
        al._Label_Status_key
    from ALL_Label al, ALL_Allele a
    where al._Allele_key = a._Allele_key
      and a.isWildType = 0
"""

MARKER_ACCID_QUERY = f"""
    select a._Object_key, a.accID, a.preferred, ldb.name as logicalDB
    from ACC_Accession a, MRK_Marker m, ACC_LogicalDB ldb
    where a._Object_key = m._Marker_key
      and a._MGIType_key = {constants.MGI_TYPE_MARKER}
      and a.private = 0
      and m._Marker_Status_key != {MARKER_WITHDRAWN}
      and a._LogicalDB_key = ldb._LogicalDB_key
"""

ALLELE_ACCID_QUERY = f"""
    select a._Object_key, a.accID, a.preferred, ldb.name as logicalDB
    from ACC_Accession a, ALL_Allele al, ACC_LogicalDB ldb
    where a._Object_key = al._Allele_key
      and a._MGIType_key = {constants.MGI_TYPE_ALLELE}
      and a.private = 0
      and a._LogicalDB_key = ldb._LogicalDB_key
"""

MARKER_DISPLAY_QUERY = f"""
    select m._Marker_key, m.symbol, m.name, m.chromosome, mt.name as markerType,
        a.accID, loc.strand, loc.startCoordinate, loc.endCoordinate
    from MRK_Marker m
    inner join MRK_Types mt on (m._Marker_Type_key = mt._Marker_Type_key)
    inner join ACC_Accession a on (a._Object_key = m._Marker_key
        and a._MGIType_key = {constants.MGI_TYPE_MARKER}
        and a._LogicalDB_key = 1 and a.preferred = 1)
    left outer join MRK_Location_Cache loc on (loc._Marker_key = m._Marker_key)
    where m._Organism_key = 1 and m._Marker_Status_key != {MARKER_WITHDRAWN}
"""

ALLELE_DISPLAY_QUERY = f"""
    select al._Allele_key, al.symbol, al.name, m.chromosome, a.accID
    from ALL_Allele al
    inner join ACC_Accession a on (a._Object_key = al._Allele_key
        and a._MGIType_key = {constants.MGI_TYPE_ALLELE}
        and a._LogicalDB_key = 1 and a.preferred = 1)
    left outer join MRK_Marker m on (al._Marker_key = m._Marker_key)
    where al.isWildType = 0
"""

# Label types that are symbols, and so go in the symbol index rather than
# the exact index.
SYMBOL_LABEL_TYPES = ('MS', 'AS')

# Map from label type to the data type stored in the index
MARKER_LABEL_DATA_TYPES = {
    'MS': constants.MARKER_SYMBOL,
    'MN': constants.MARKER_NAME,
    'MY': constants.MARKER_SYNONYM,
    'OS': constants.ORTHOLOG_SYMBOL,
    'ON': constants.ORTHOLOG_NAME,
}

ALLELE_LABEL_DATA_TYPES = {
    'AS': constants.ALLELE_SYMBOL,
    'AN': constants.ALLELE_NAME,
    'AY': constants.ALLELE_SYNONYM,
}

CURRENT_LABEL = 1


def unique_key(db_key, data, data_type):
    return f"{db_key}{data}{data_type}"


def location_display(chromosome, start, end):
    """Chr11:12345-67890 when coordinates are known, else Chr11."""
    if not chromosome:
        return ''
    if start is None or end is None:
        return f"Chr{chromosome}"
    return f"Chr{chromosome}:{int(start)}-{int(end)}"


class GenomeFeatureExactGatherer(DatabaseGatherer):
    """Whole names, synonyms and ortholog labels of markers and alleles."""

    builder_class = GenomeFeatureExactDocBuilder

    def subtasks(self):
        return [self.do_marker_labels, self.do_allele_labels]

    def _push_labels(self, rows, key_column, data_types, object_type):
        for row in rows:
            if row['labelType'] in SYMBOL_LABEL_TYPES:
                continue
            data_type = data_types.get(row['labelType'], row['labelType'])
            self.builder.set(
                db_key=row[key_column],
                data=row['label'],
                data_type=data_type,
                display_type=row['labelTypeName'],
                provider=object_type,
                unique_key=unique_key(row[key_column], row['label'], data_type),
            )
            self.push_builder()

    def do_marker_labels(self):
        rows = self.gather(MARKER_LABEL_QUERY, 'marker label')
        self._push_labels(rows, '_Marker_key', MARKER_LABEL_DATA_TYPES, constants.MARKER_TYPE_NAME)
        logger.info("Done collecting Marker Labels!")

    def do_allele_labels(self):
        rows = self.gather(ALLELE_LABEL_QUERY, 'allele label')
        self._push_labels(rows, '_Allele_key', ALLELE_LABEL_DATA_TYPES, constants.ALLELE_TYPE_NAME)
        logger.info("Done collecting Allele Labels!")


class GenomeFeatureSymbolGatherer(DatabaseGatherer):
    """Marker and allele symbols."""

    builder_class = GenomeFeatureSymbolDocBuilder

    def subtasks(self):
        return [self.do_marker_symbols, self.do_allele_symbols]

    def _push_symbols(self, rows, key_column, label_type, data_type):
        for row in rows:
            if row['labelType'] != label_type:
                continue
            self.builder.set(
                db_key=row[key_column],
                data=row['label'],
                data_type=data_type,
                display_type=row['labelTypeName'],
                unique_key=unique_key(row[key_column], row['label'], data_type),
            )
            self.push_builder()

    def do_marker_symbols(self):
        rows = self.gather(MARKER_LABEL_QUERY, 'marker symbol')
        self._push_symbols(rows, '_Marker_key', 'MS', constants.MARKER_SYMBOL)
        logger.info("Done collecting Marker Symbols!")

    def do_allele_symbols(self):
        rows = self.gather(ALLELE_LABEL_QUERY, 'allele symbol')
        self._push_symbols(rows, '_Allele_key', 'AS', constants.ALLELE_SYMBOL)
        logger.info("Done collecting Allele Symbols!")


class GenomeFeatureAccIDGatherer(DatabaseGatherer):
    """Public accession IDs of markers and alleles."""

    builder_class = GenomeFeatureAccIDDocBuilder

    def subtasks(self):
        return [self.do_marker_accession_ids, self.do_allele_accession_ids]

    def _push_ids(self, rows, data_type):
        for row in rows:
            self.builder.set(
                db_key=row['_Object_key'],
                data=row['accID'],
                data_type=data_type,
                provider=row['logicalDB'],
                display_type='ID',
            )
            self.push_builder()

    def do_marker_accession_ids(self):
        self._push_ids(self.gather(MARKER_ACCID_QUERY, 'marker accession id'), constants.ACCESSION_ID)
        logger.info("Done collecting Marker Accession IDs!")

    def do_allele_accession_ids(self):
        self._push_ids(self.gather(ALLELE_ACCID_QUERY, 'allele accession id'), constants.ALLELE_ACCESSION_ID)
        logger.info("Done collecting Allele Accession IDs!")


class GenomeFeatureInexactGatherer(DatabaseGatherer):
    """Every marker and allele label, broken into small tokens."""

    builder_class = GenomeFeatureInexactDocBuilder

    def subtasks(self):
        return [self.do_marker_labels, self.do_allele_labels]

    def do_marker_labels(self):
        for row in self.gather(MARKER_LABEL_QUERY, 'marker label'):
            data_type = MARKER_LABEL_DATA_TYPES.get(row['labelType'], row['labelType'])
            self.builder.set(
                db_key=row['_Marker_key'],
                data=row['label'],
                data_type=data_type,
                is_current=int(row['_Label_Status_key'] == CURRENT_LABEL),
                organism=row['organism'],
                object_type=constants.MARKER_TYPE_NAME,
                display_type=row['labelTypeName'],
                unique_key=unique_key(row['_Marker_key'], row['label'], data_type),
            )
            self.push_builder()
        logger.info("Done collecting Marker Labels!")

    def do_allele_labels(self):
        for row in self.gather(ALLELE_LABEL_QUERY, 'allele label'):
            data_type = ALLELE_LABEL_DATA_TYPES.get(row['labelType'], row['labelType'])
            self.builder.set(
                db_key=row['_Allele_key'],
                data=row['label'],
                data_type=data_type,
                is_current=int(row['_Label_Status_key'] == CURRENT_LABEL),
                organism='mouse',
                object_type=constants.ALLELE_TYPE_NAME,
                display_type=row['labelTypeName'],
                unique_key=unique_key(row['_Allele_key'], row['label'], data_type),
            )
            self.push_builder()
        logger.info("Done collecting Allele Labels!")


class GenomeFeatureDisplayGatherer(DatabaseGatherer):
    """One display document per marker and per allele."""

    builder_class = GenomeFeatureDisplayDocBuilder

    def subtasks(self):
        return [self.do_marker_display, self.do_allele_display]

    def do_marker_display(self):
        for row in self.gather(MARKER_DISPLAY_QUERY, 'marker display'):
            self.builder.set(
                db_key=row['_Marker_key'],
                symbol=row['symbol'],
                name=row['name'],
                chromosome=row['chromosome'],
                marker_type=row['markerType'],
                mgi_id=row['accID'],
                strand=row['strand'] or '',
                location_display=location_display(
                    row['chromosome'], row['startCoordinate'], row['endCoordinate']),
                object_type=constants.MARKER_TYPE_NAME,
                batch_value=row['accID'],
            )
            self.push_builder()
        logger.info("Done collecting Marker Display information!")

    def do_allele_display(self):
        for row in self.gather(ALLELE_DISPLAY_QUERY, 'allele display'):
            self.builder.set(
                db_key=row['_Allele_key'],
                symbol=row['symbol'],
                name=row['name'],
                chromosome=row['chromosome'] or '',
                mgi_id=row['accID'],
                location_display=location_display(row['chromosome'], None, None),
                object_type=constants.ALLELE_TYPE_NAME,
                batch_value=row['accID'],
            )
            self.push_builder()
        logger.info("Done collecting Allele Display information!")

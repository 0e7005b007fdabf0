"""
Data type codes stored in the indexes, shared by gatherers and the search
tool that reads the indexes.
"""

# Vocabulary data types
VOCAB_TERM = 'vT'
VOCAB_SYNONYM = 'vS'
VOCAB_NOTE = 'vN'
ACCESSION_ID = 'acc'

# Genome feature data types
MARKER_SYMBOL = 'mS'
MARKER_NAME = 'mN'
MARKER_SYNONYM = 'mY'
ALLELE_SYMBOL = 'aS'
ALLELE_NAME = 'aN'
ALLELE_SYNONYM = 'aY'
ORTHOLOG_SYMBOL = 'oS'
ORTHOLOG_NAME = 'oN'
ALLELE_ACCESSION_ID = 'aACC'

# Object types
MARKER_TYPE_NAME = 'MARKER'
ALLELE_TYPE_NAME = 'ALLELE'

# Other (ID only) object types, keyed by MGI type key
OTHER_TYPES = {
    1: 'REFERENCE',
    3: 'PROBE',
    4: 'EXPERIMENT',
    6: 'ANTIBODY',
    7: 'ANTIGEN',
    8: 'ASSAY',
    9: 'IMAGE',
    19: 'SEQUENCE',
    28: 'ESCELL',
}

# MGI type keys
MGI_TYPE_MARKER = 2
MGI_TYPE_STRAIN = 10
MGI_TYPE_ALLELE = 11
MGI_TYPE_TERM = 13

# Vocabularies (by _Vocab_key) that are indexed: DO, GO, MP, InterPro,
# PIRSF and EMAPA.
INDEXED_VOCABS = (125, 4, 5, 8, 46, 90)

# Logical database of OMIM ids carried by Disease Ontology terms
OMIM_LOGICAL_DB = 15

# Vocabulary terms annotated to genome features, as (_Vocab_key, annotation
# type) pairs: GO, MP, InterPro, PIRSF and DO.
FEATURE_ANNOTATION_TYPES = (
    (4, 'GO/Marker'),
    (5, 'Mammalian Phenotype/Genotype'),
    (8, 'InterPro/Marker'),
    (46, 'PIRSF/Marker'),
    (125, 'DO/Genotype'),
    (125, 'DO/Human Marker'),
)

# Annotation types that are also made to alleles
ALLELE_ANNOTATION_TYPES = ('Mammalian Phenotype/Genotype', 'DO/Genotype')

# DO terms annotated to human markers are searched as their own vocabulary
DO_ORTHOLOG_ANNOTATION_TYPE = 'DO/Human Marker'
DO_ORTHOLOG_VOCAB = 'Disease Ortholog'

"""
Analyzers used by the search tool indexes.
"""
from nltk.stem import PorterStemmer
from whoosh.analysis import LowercaseFilter, RegexTokenizer, SpaceSeparatedTokenizer, StemFilter

# Words, numbers and the symbol punctuation MGI nomenclature keeps inside a
# token (Pax6-rs1, Ttc39a/b, D1Mit1.2).
MGI_TOKEN_PATTERN = r"[A-Za-z0-9]+(?:[-'/.:][A-Za-z0-9]+)*"

_stemmer = PorterStemmer()


def porter_stem(word):
    """Module level so the analyzer can be pickled into the index TOC."""
    return _stemmer.stem(word)


# Unstemmed analyzer for the "data" field of the inexact indexes
MGI_ANALYZER = RegexTokenizer(MGI_TOKEN_PATTERN) | LowercaseFilter()

# Stemmed analyzer for the "sdata" field of the inexact indexes
STEMMED_MGI_ANALYZER = (
    RegexTokenizer(MGI_TOKEN_PATTERN)
    | LowercaseFilter()
    | StemFilter(stemfn=porter_stem)
)

# Breaks input on whitespace only, so we get a listing of the large tokens
TOKEN_ANALYZER = SpaceSeparatedTokenizer() | LowercaseFilter()

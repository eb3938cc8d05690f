"""Template structure parsing: delimiters, block tree, variable extraction."""

from tplreflect.parse.block import ROOT, Block
from tplreflect.parse.extract import extract_booleans, extract_variables, infer_datatype
from tplreflect.parse.scanner import LOOP, WITH, normalize, scan_delimiters

__all__ = [
    "LOOP",
    "ROOT",
    "WITH",
    "Block",
    "extract_booleans",
    "extract_variables",
    "infer_datatype",
    "normalize",
    "scan_delimiters",
]

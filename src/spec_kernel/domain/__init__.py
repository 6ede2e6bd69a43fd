from .model import Scenario, SpecDocument, Step
from .result import Result, aggregate
from .values import Table, TextBlock, make_table

# Domain exports are plain data: no execution or parsing behaviour lives here.
__all__ = [
    "Result",
    "aggregate",
    "Scenario",
    "SpecDocument",
    "Step",
    "Table",
    "TextBlock",
    "make_table",
]

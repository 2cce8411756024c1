from .errors import InfiniteLoopError, InterfaceContractError, SanitizeError
from .filters import FilterAction, FilterContext, FilterOutcome
from .node import Document, Node
from .options import CompiledOptions, ProcessingOptions, compile_options
from .sanitizer import Sanitizer, process_children, process_markup, process_markup_nodes, process_node
from .serialize import inner_html, to_html
from .side_table import SideTable

__all__ = [
    "CompiledOptions",
    "Document",
    "FilterAction",
    "FilterContext",
    "FilterOutcome",
    "InfiniteLoopError",
    "InterfaceContractError",
    "Node",
    "ProcessingOptions",
    "SanitizeError",
    "Sanitizer",
    "SideTable",
    "compile_options",
    "inner_html",
    "process_children",
    "process_markup",
    "process_markup_nodes",
    "process_node",
    "to_html",
]

"""Domain services.

The expansion and validation engine: code system lookups, compose
evaluation, value set expansion and code validation.
"""

from .code_system_index import CodeSystemIndex
from .set_evaluator import EvaluatedSet, SetEvaluator
from .terminology_service import LocalTerminologyService
from .value_set_expander import ExpanderSettings, ValueSetExpander

__all__ = [
    "CodeSystemIndex",
    "EvaluatedSet",
    "ExpanderSettings",
    "LocalTerminologyService",
    "SetEvaluator",
    "ValueSetExpander",
]

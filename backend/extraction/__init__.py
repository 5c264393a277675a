"""Rule-Driven Form Extraction

Decodes untyped multi-valued string input (submitted form or query fields)
into a typed, bound-checked mapping according to a declarative rule set,
or fails with the first violation.

Key Features:
- Rule sets compiled once into tagged variants; malformed rules fail eagerly
- Scalar (string/int/float/bool) and collection (strings/ints/floats/bools) types
- min/max value or length bounds, min_amt/max_amt value count bounds
- Result-typed outcome with distinct ErrorCodes per failure category
- Extension resolvers for custom type tags
- Starlette/FastAPI adapter

Usage:
    from extraction import Extractor
    from core.errors import Ok, Err

    extractor = Extractor({"name": "must", "age": {"type": "int", "min": 0, "max": 150}})
    result = extractor.extract({"name": ["Ada"], "age": ["36"]})
    assert result == Ok({"name": "Ada", "age": 36})
"""
from .rules import (
    RuleSet,
    Rule,
    PassThrough,
    Ignore,
    MandatoryString,
    TypedRule,
    MalformedRuleError,
    compile_rule,
    SCALAR_TYPES,
    COLLECTION_TYPES,
)
from .bounds import within, within_value_bounds, within_count_bounds
from .coercion import (
    Coercion,
    ScalarCoercer,
    StringCoercer,
    IntCoercer,
    FloatCoercer,
    BoolCoercer,
    CollectionCoercer,
    SCALAR_COERCERS,
    COLLECTION_COERCERS,
)
from .resolvers import TypeResolver, FunctionResolver, ResolverRegistry
from .engine import Extractor, extract
from .adapters import to_multimap, extract_form, extracted_fields

__all__ = [
    # Rules
    "RuleSet",
    "Rule",
    "PassThrough",
    "Ignore",
    "MandatoryString",
    "TypedRule",
    "MalformedRuleError",
    "compile_rule",
    "SCALAR_TYPES",
    "COLLECTION_TYPES",
    # Bounds
    "within",
    "within_value_bounds",
    "within_count_bounds",
    # Coercion
    "Coercion",
    "ScalarCoercer",
    "StringCoercer",
    "IntCoercer",
    "FloatCoercer",
    "BoolCoercer",
    "CollectionCoercer",
    "SCALAR_COERCERS",
    "COLLECTION_COERCERS",
    # Resolvers
    "TypeResolver",
    "FunctionResolver",
    "ResolverRegistry",
    # Engine
    "Extractor",
    "extract",
    # Web adapter
    "to_multimap",
    "extract_form",
    "extracted_fields",
]

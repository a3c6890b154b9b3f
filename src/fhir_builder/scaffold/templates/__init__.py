"""
Scaffold Template Sets

One module per stack, each exposing a ``TEMPLATE_SET``.
"""

from fhir_builder.scaffold.stacks import Stack, TemplateSet
from fhir_builder.scaffold.templates import next_fhir, node_hapi, python_flask

DEFAULT_TEMPLATE_SETS: dict[Stack, TemplateSet] = {
    Stack.NODE_HAPI: node_hapi.TEMPLATE_SET,
    Stack.NEXT_FHIR: next_fhir.TEMPLATE_SET,
    Stack.PYTHON_FLASK: python_flask.TEMPLATE_SET,
}

__all__ = ["DEFAULT_TEMPLATE_SETS"]

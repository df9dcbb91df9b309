"""Services package - service class exports."""

from app.services.datasource import JsonDataSource
from app.services.macros import TemplateVariables, VariableStore

__all__ = [
    "JsonDataSource",
    "TemplateVariables",
    "VariableStore",
]

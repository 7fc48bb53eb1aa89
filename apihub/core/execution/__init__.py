"""Execution module for the API hub.

Provides auth resolution, template filling and the request executor.
"""

from apihub.core.execution.auth_resolver import AuthArtifact, AuthResolver
from apihub.core.execution.outcome import OutcomeCategory, classify
from apihub.core.execution.request_executor import RequestExecutor
from apihub.core.execution.template_filler import ParamPlacement, TemplateFiller

__all__ = [
    "AuthArtifact",
    "AuthResolver",
    "OutcomeCategory",
    "classify",
    "RequestExecutor",
    "ParamPlacement",
    "TemplateFiller",
]

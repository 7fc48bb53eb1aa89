"""Template filler for the API hub.

Resolves {{name}} placeholders in endpoint paths, query maps and body templates.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from apihub.infrastructure.storage.models import Capability

PLACEHOLDER = re.compile(r"\{\{([^{}]+)\}\}")

# Characters encodeURIComponent leaves alone besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def placeholder(name: str) -> str:
    return f"{{{{{name}}}}}"


def stringify(value: Any) -> str:
    """Render a parameter for use in a URL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def encode_component(value: Any) -> str:
    """Percent-encode a value the way encodeURIComponent does."""
    return quote(stringify(value), safe=_URI_COMPONENT_SAFE)


@dataclass
class ParamPlacement:
    """Where each scheduled-job parameter ends up for one dispatch."""

    path_params: Dict[str, Any] = field(default_factory=dict)
    query_params: Dict[str, Any] = field(default_factory=dict)
    body: Optional[Any] = None
    dropped: List[str] = field(default_factory=list)


class TemplateFiller:
    """Fills {{name}} placeholders.

    Follows Single Responsibility Principle: Only handles template resolution.
    Pure functions that build new values and never mutate their inputs.
    """

    @staticmethod
    def fill_path(endpoint: str, params: Optional[Dict[str, Any]]) -> str:
        """Replace every {{name}} in a path with the URL-encoded params[name].

        Placeholders without a matching param stay in place.

        Examples:
            >>> TemplateFiller.fill_path("/users/{{id}}", {"id": "a b"})
            '/users/a%20b'
            >>> TemplateFiller.fill_path("/users/{{id}}", {})
            '/users/{{id}}'
        """
        if not params:
            return endpoint

        def substitute(match: re.Match) -> str:
            name = match.group(1)
            if name in params:
                return encode_component(params[name])
            return match.group(0)

        return PLACEHOLDER.sub(substitute, endpoint)

    @staticmethod
    def fill_body(template: Any, params: Optional[Dict[str, Any]]) -> Any:
        """Recursively fill a body template, returning a new tree.

        A string leaf that is exactly {{name}} becomes params[name] with its
        native type. Strings containing a placeholder among other text are
        left as they are.

        Examples:
            >>> TemplateFiller.fill_body({"count": "{{n}}"}, {"n": 5})
            {'count': 5}
            >>> TemplateFiller.fill_body({"label": "id-{{n}}"}, {"n": 5})
            {'label': 'id-{{n}}'}
        """
        params = params or {}

        if isinstance(template, str):
            match = PLACEHOLDER.fullmatch(template)
            if match and match.group(1) in params:
                return params[match.group(1)]
            return template

        elif isinstance(template, dict):
            return {k: TemplateFiller.fill_body(v, params) for k, v in template.items()}

        elif isinstance(template, list):
            return [TemplateFiller.fill_body(item, params) for item in template]

        else:
            # Primitive values (int, float, bool, None) pass through
            return template

    @staticmethod
    def references(template: Any, name: str) -> bool:
        """True if the placeholder for name appears anywhere in the template."""
        token = placeholder(name)
        if isinstance(template, str):
            return token in template
        if isinstance(template, dict):
            return any(TemplateFiller.references(v, name) for v in template.values())
        if isinstance(template, list):
            return any(TemplateFiller.references(item, name) for item in template)
        return False

    @staticmethod
    def place_params(capability: Capability, params: Optional[Dict[str, Any]]) -> ParamPlacement:
        """Split job params into path, query and body for one capability call.

        A param whose placeholder appears in the endpoint goes to the path.
        Otherwise GET sends it as a query parameter. Non-GET methods only use it
        when the body template references it, and drop it otherwise.
        """
        params = params or {}
        method = (capability.method or "GET").upper()
        placement = ParamPlacement()

        for name, value in params.items():
            if placeholder(name) in capability.endpoint:
                placement.path_params[name] = value
            elif method == "GET":
                placement.query_params[name] = value
            elif not TemplateFiller.references(capability.body_template, name):
                placement.dropped.append(name)

        if capability.body_template is not None and method != "GET":
            placement.body = TemplateFiller.fill_body(capability.body_template, params)

        return placement

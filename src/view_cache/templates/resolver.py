"""
Include resolution against a template snapshot instead of the filesystem.
"""
import logging
from typing import Any, List, Mapping, MutableMapping, Optional

from jinja2 import BaseLoader, Environment, Template, TemplateNotFound

logger = logging.getLogger(__name__)


class IncludeResolver(BaseLoader):
    """
    Jinja loader serving compiled templates from one snapshot generation.

    Every ``include``, ``extends`` and ``import`` evaluated by the snapshot's
    environment resolves here, so a render never reads from disk and never
    sees templates of another generation.
    """

    has_source_access = False

    def __init__(self, templates: Mapping[str, Template]):
        self._templates = templates

    def resolve(self, name: str) -> Optional[Template]:
        """Return the compiled template called name, or None when absent."""
        return self._templates.get(name)

    def load(
        self,
        environment: Environment,
        name: str,
        globals: Optional[MutableMapping[str, Any]] = None,
    ) -> Template:
        template = self.resolve(name)
        if template is None:
            logger.debug(f"Include not found in snapshot: {name}")
            raise TemplateNotFound(name)
        return template

    def list_templates(self) -> List[str]:
        return sorted(self._templates)

    def get_source(self, environment: Environment, template: str):
        # Sources are discarded once compiled
        raise TemplateNotFound(template)

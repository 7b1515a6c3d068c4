"""JSON-LD output for the hosting page."""

from .graph import SchemaGraph
from .logging import get_logger

logger = get_logger(__name__)

SCRIPT_TEMPLATE = '<script type="application/ld+json">{json}</script>\n'

# JSON string escapes for characters that could end the script element early
HTML_SAFE_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def escape_script_payload(payload: str) -> str:
    """Escape markup-significant characters in a JSON payload.

    The result decodes to the same JSON value.
    """
    return payload.translate(str.maketrans(HTML_SAFE_ESCAPES))


class OutputService:
    """Renders a finished graph as a JSON-LD script tag."""

    def __init__(self, compact_single: bool = False):
        self.compact_single = compact_single

    def render(self, graph: SchemaGraph) -> str:
        """Return the script tag, or an empty string for an empty graph."""
        if graph.is_empty():
            return ""

        payload = escape_script_payload(graph.to_document_json(self.compact_single))
        logger.debug("Rendered JSON-LD", pieces=graph.count(), size=len(payload))
        return SCRIPT_TEMPLATE.format(json=payload)

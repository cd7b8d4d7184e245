"""Document-level checks for KML conversion.

Responsibilities:
- Reject empty input
- Parse bytes into an lxml tree with entity resolution and network
  access disabled
- Check the root element is ``<kml>``

Anything past this point is converted as-is; malformed geometry is not
repaired.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_viewer.activities.convert_kml._constants import KML_NAMESPACE
from kml_viewer.core.exceptions import ValidationError

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("kml_viewer.activities.convert_kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class ParseFailure(ValidationError):
    """Raised when uploaded content is not a well-formed KML document."""

    default_stage = "convert_kml"
    default_code = "KML_PARSE_FAILED"


# ---------------------------------------------------------------------------
# XML / KML root validation
# ---------------------------------------------------------------------------


def parse_document(content: bytes) -> _Element:
    """Parse raw KML bytes and return the root ``<kml>`` element.

    Raises:
        ParseFailure: If the content is empty, not valid XML, or the
            root element is not ``<kml>``.
    """
    from lxml import etree  # type: ignore[attr-defined]

    if not content.strip():
        msg = "KML document is empty"
        raise ParseFailure(msg)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root: _Element = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML: {exc}"
        raise ParseFailure(msg) from exc

    tag = root.tag
    if not isinstance(tag, str) or (
        f"{{{KML_NAMESPACE}}}" not in tag and "kml" not in tag.lower()
    ):
        msg = f"Not a KML document, root element is <{tag}>"
        raise ParseFailure(msg)

    logger.debug("Parsed KML root element <%s>", tag)
    return root

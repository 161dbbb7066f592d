import logging
from typing import List, Optional, Tuple

from markuplinks.config import ScanConfig
from markuplinks.dispatcher import Diagnostic, FoundLink, iter_links
from markuplinks.utils import scanning_file

logger = logging.getLogger(__name__)


def scan_text(
    text: str, config: Optional[ScanConfig] = None
) -> Tuple[List[FoundLink], List[Diagnostic]]:
    if config is None:
        config = ScanConfig()
    diagnostics: List[Diagnostic] = []
    on_error = diagnostics.append if config.report_errors else None
    links = list(iter_links(text, dialects=config.dialects, on_error=on_error))
    return links, diagnostics


def scan_file(
    filepath: str, config: Optional[ScanConfig] = None
) -> Tuple[List[FoundLink], List[Diagnostic]]:
    logger.info("++ scanning: %s" % filepath)
    with open(filepath, "r", encoding="utf-8") as f:
        content = f.read()
    links, diagnostics = scan_text(content, config=config)
    with scanning_file(filepath):
        for d in diagnostics:
            logger.warning("%d:%d: %s: %s" % (d.line, d.column, d.dialect.value, d.message))
    logger.debug("++ found %d links" % len(links))
    return links, diagnostics

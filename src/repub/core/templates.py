"""Fixed documents written into every book."""

from xml.sax.saxutils import escape, quoteattr

EPUB_MIMETYPE = "application/epub+zip"
PACKAGE_PATH = "OEBPS/package.opf"

CONTAINER_XML = f"""<?xml version="1.0" encoding="utf-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{PACKAGE_PATH}" media-type="application/oebps-package+xml" />
  </rootfiles>
</container>
"""

VERTICAL_CSS = "html { writing-mode: vertical-rl; -epub-writing-mode: vertical-rl; }\n"

VERTICAL_CSS_LINK = '<link type="text/css" rel="stylesheet" href="styles/vertical.css" />'
CUSTOM_CSS_LINK = '<link type="text/css" rel="stylesheet" href="styles/custom.css" />'

XHTML_DECLARATION = "<?xml version='1.0' encoding='utf-8'?>\n<!DOCTYPE html>\n"


def stylesheet_links(vertical: bool) -> str:
    links = [CUSTOM_CSS_LINK]
    if vertical:
        links.insert(0, VERTICAL_CSS_LINK)
    return "\n".join(links)


def content_document(title: str, body: str, vertical: bool) -> str:
    """Wrap a rendered Markdown body in the XHTML content document shell."""
    return (
        f"{XHTML_DECLARATION}"
        '<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">\n'
        "<head>\n"
        '<meta charset="utf-8" />\n'
        f"{stylesheet_links(vertical)}\n"
        f"<title>{escape(title)}</title>\n"
        "</head>\n"
        f"<body>\n{body}\n</body>\n"
        "</html>\n"
    )


def navigation_document(toc_list: str, title: str, language: str, vertical: bool) -> str:
    """Wrap a rendered ToC list in the EPUB navigation document shell."""
    lang = quoteattr(language)
    head_link = f"{VERTICAL_CSS_LINK}\n" if vertical else ""
    return (
        f"{XHTML_DECLARATION}"
        f"<html xml:lang={lang} lang={lang} "
        'xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">\n'
        "<head>\n"
        '<meta charset="utf-8" />\n'
        f"<title>{escape(title)}</title>\n"
        f"{head_link}"
        "</head>\n"
        "<body>\n"
        '<nav epub:type="toc">\n'
        f"<h1>{escape(title)}</h1>\n"
        f"{toc_list}\n"
        "</nav>\n"
        "</body>\n"
        "</html>\n"
    )

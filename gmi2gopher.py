#!/usr/bin/env python3

import re
import sys
import argparse
import textwrap


#: Default wrap width of the rendered text
DEFAULT_WIDTH = 80

#: Schemes rendered as HTML redirection lines in Gopher maps
_WEB_SCHEMES_REGEXP = re.compile(r"^(https?|gemini)://")


class GopherDocType:
    """Gopher item types used in the generated Gopher maps."""

    TEXT = "0"
    DIRECTORY = "1"
    BINARY = "9"
    HTML = "h"


def split_lines(text):
    """Split the given text on Unix and Windows end of lines.

    :param str text: The text to split.
    :rtype: list<str>
    :return: The lines, without their end of line characters.

    >>> split_lines("Windows\\r\\nand Unix\\n\\nEOL")
    ['Windows', 'and Unix', '', 'EOL']
    """
    return re.split(r"\r?\n", text)


def wrap_text(text, width=DEFAULT_WIDTH, indent=""):
    """Word-wrap the given text.

    Lines are only broken on whitespaces: a word longer than the width is
    kept whole on its own line.

    :param str text: The text to wrap.
    :param int width: The maximum width of the lines.
    :param str indent: The string added at the beginning of every line but
                       the first one.
    :rtype: list<str>
    :return: The wrapped lines (at least one, possibly empty).

    >>> wrap_text("foo bar baz", width=7)
    ['foo bar', 'baz']
    >>> wrap_text("foo bar baz", width=7, indent="  ")
    ['foo bar', '  baz']
    >>> wrap_text("")
    ['']
    """
    wrapper = textwrap.TextWrapper(
        width=width,
        subsequent_indent=indent,
        break_long_words=False,
        break_on_hyphens=False,
    )
    return wrapper.wrap(text) or [""]


def get_document_type(path, internal=False):
    """Guess the Gopher item type of a document from its file name.

    :param str path: The path (or selector) of the document.
    :param bool internal: Whether the path targets a document of the
                          converted site (``.gmi`` files are then served as
                          plain text).
    :rtype: str
    :return: One of the :class:`GopherDocType` values.

    >>> get_document_type("/docs/")
    '1'
    >>> get_document_type("/notes.txt")
    '0'
    >>> get_document_type("/page.gmi")
    '9'
    >>> get_document_type("/page.gmi", internal=True)
    '0'
    >>> get_document_type("/blog/index.gmi", internal=True)
    '1'
    """
    filename = path.split("/")[-1]
    if not filename or "." not in filename:
        return GopherDocType.DIRECTORY
    extension = filename.split(".")[-1].lower()
    if extension == "gmi" and internal:
        if filename.lower() == "index.gmi":
            return GopherDocType.DIRECTORY
        return GopherDocType.TEXT
    if extension == "txt":
        return GopherDocType.TEXT
    if extension == "html":
        return GopherDocType.HTML
    return GopherDocType.BINARY


def convert_gmi_path(path):
    """Rewrite the path of an internal document to its plain text version.

    :param str path: The path of the Gemtext document.
    :rtype: str

    >>> convert_gmi_path("/blog/post.gmi")
    '/blog/post.txt'
    >>> convert_gmi_path("/blog/index.gmi")
    '/blog'
    >>> convert_gmi_path("index.gmi")
    '/'
    >>> convert_gmi_path("/image.png")
    '/image.png'
    """
    head, _, filename = path.rpartition("/")
    if filename.lower() == "index.gmi":
        return head or "/"
    if filename.lower().endswith(".gmi"):
        return path[: -len(".gmi")] + ".txt"
    return path


def parse_gopher_url(url):
    """Parse a ``gopher://host[:port]/<type><selector>`` URL.

    :param str url: The Gopher URL.
    :rtype: (str, str, str) or None
    :return: The host, the port and the selector of the URL, or ``None`` if
             the URL has no path at all.

    >>> parse_gopher_url("gopher://example.com:7070/1/foo")
    ('example.com', '7070', '/foo')
    >>> parse_gopher_url("gopher://example.com/")
    ('example.com', '70', '/')
    >>> parse_gopher_url("gopher://example.com") is None
    True
    """
    location = url[len("gopher://") :]
    host, separator, path = location.partition("/")
    if not separator:
        return None
    port = "70"
    if ":" in host:
        host, port = host.rsplit(":", 1)
        port = port or "70"
    # The first character of the path is the item type
    selector = path[1:] or "/"
    return host, port, selector


def parse_link(line):
    """Parse a Gemtext link line.

    :param str line: The link line (starting with ``=>``).
    :rtype: (str, str) or None
    :return: The target and the label (``None`` if the link has no label),
             or ``None`` if the line contains no target.

    >>> parse_link("=> /about.gmi  About   me")
    ('/about.gmi', 'About me')
    >>> parse_link("=> /about.gmi")
    ('/about.gmi', None)
    >>> parse_link("=>") is None
    True
    """
    pieces = line.split()
    if len(pieces) < 2:
        return None
    target = pieces[1]
    label = " ".join(pieces[2:]) or None
    return target, label


def format_external_gopher_link(target, label):
    gopher_url = parse_gopher_url(target)
    if gopher_url is None:
        return label
    host, port, selector = gopher_url
    document_type = get_document_type(selector)
    return "%s%s\t%s\t%s\t%s" % (document_type, label, selector, host, port)


def format_internal_link(target, label):
    document_type = get_document_type(target, internal=True)
    return "%s%s\t%s" % (document_type, label, convert_gmi_path(target))


def format_gopher_link(target, label=None):
    """Format a link as a Gopher map line.

    :param str target: The link target.
    :param str label: The link label (defaults to the target).
    :rtype: str

    >>> format_gopher_link("https://example.com", "Example")
    'hExample\\tURL:https://example.com'
    >>> format_gopher_link("/page.gmi", "Page")
    '0Page\\t/page.txt'
    """
    label = label or target
    if target.startswith("gopher://"):
        return format_external_gopher_link(target, label)
    if _WEB_SCHEMES_REGEXP.match(target):
        return "h%s\tURL:%s" % (label, target)
    return format_internal_link(target, label)


def format_plain_text_link(target, label=None):
    """Format a link as plain text.

    :param str target: The link target.
    :param str label: The link label.
    :rtype: str

    >>> format_plain_text_link("/page.gmi", "Page Title")
    'Page Title: /page.gmi'
    >>> format_plain_text_link("/page.gmi")
    '/page.gmi'
    """
    if label:
        return "%s: %s" % (label, target)
    return target


class Dialect:
    """Rendering policies of an output format.

    :param str name: The name of the dialect.
    :param str text_prefix: The string added at the beginning of every text
                            line (the Gopher "info" item type, for example).
    :param format_link: The function used to render links, called with the
                        link target and label.
    """

    def __init__(self, name, text_prefix, format_link):
        self.name = name
        self.text_prefix = text_prefix
        self.format_link = format_link

    def __repr__(self):
        return "<Dialect %s>" % self.name


GOPHER = Dialect("gopher", "i", format_gopher_link)
PLAIN_TEXT = Dialect("plaintext", "", format_plain_text_link)

#: Available dialects, by name
DIALECTS = {dialect.name: dialect for dialect in [GOPHER, PLAIN_TEXT]}


def get_dialect(name):
    """Get a dialect from its name.

    :param str name: The name of the dialect (``gopher`` or ``plaintext``).
    :rtype: Dialect
    :raise ValueError: If there is no dialect with the given name.
    """
    if name not in DIALECTS:
        raise ValueError(
            "Unknown dialect '%s' (available: %s)" % (name, ", ".join(DIALECTS))
        )
    return DIALECTS[name]


class GemtextConverter:
    """Convert Gemtext documents line by line.

    :param dialect: The output dialect (a :class:`Dialect` or its name).
    :param int width: The wrap width of text lines.
    :param bool preserve_preformatted: Emit the content of preformatted
                                       blocks verbatim instead of rendering it
                                       as regular text.
    """

    def __init__(
        self, dialect=GOPHER, width=DEFAULT_WIDTH, preserve_preformatted=False
    ):
        if isinstance(dialect, str):
            dialect = get_dialect(dialect)
        if width < 1:
            raise ValueError("The width must be a positive integer (got %r)" % width)
        self.dialect = dialect
        self.width = width
        self.preserve_preformatted = preserve_preformatted

    def convert(self, gmi_text):
        """Convert a whole Gemtext document.

        :param str gmi_text: The Gemtext document.
        :rtype: str
        :return: The converted document, each line ending with a newline.
        """
        lines = []
        in_preformatted = False
        for line in split_lines(gmi_text):
            if line.startswith("```"):
                if self.preserve_preformatted:
                    in_preformatted = not in_preformatted
                continue
            if in_preformatted:
                # Tabs are field separators in Gopher maps
                lines.append(self.dialect.text_prefix + line.expandtabs())
            else:
                lines.append(self.convert_line(line))
        return "".join(line + "\n" for line in lines)

    def convert_line(self, line, prefix=None):
        """Render a single Gemtext line.

        :param str line: The line, without its end of line.
        :param str prefix: The string added at the beginning of rendered text
                           lines (defaults to the dialect text prefix).
        :rtype: str
        """
        if prefix is None:
            prefix = self.dialect.text_prefix
        if line.startswith("=>"):
            return self.render_link(line)
        if line.startswith("#"):
            return self.render_heading(line, prefix)
        if line.startswith("*"):
            return self.render_list_item(line, prefix)
        if line.startswith(">"):
            return self.render_blockquote(line, prefix)
        if line.strip():
            return self.render_paragraph(line, prefix)
        return ""

    def render_heading(self, line, prefix):
        wrapped_lines = wrap_text(re.sub(r"^#+ ", "", line), self.width)
        underline_width = max(len(wrapped.rstrip()) for wrapped in wrapped_lines)
        heading = [prefix + wrapped for wrapped in wrapped_lines]
        heading.append(prefix + "=" * underline_width)
        return "\n".join(heading)

    def render_list_item(self, line, prefix):
        wrapped_lines = wrap_text(re.sub(r"^\* ", "", line), self.width, indent="  ")
        return "\n".join(prefix + wrapped for wrapped in wrapped_lines)

    def render_blockquote(self, line, prefix):
        return self.render_paragraph(re.sub(r"^> *", "", line), prefix + "> ")

    def render_paragraph(self, line, prefix):
        wrapped_lines = wrap_text(line, self.width)
        return "\n".join(prefix + wrapped for wrapped in wrapped_lines)

    def render_link(self, line):
        link = parse_link(line)
        if link is None:
            return line
        target, label = link
        return self.dialect.format_link(target, label)


def convert(
    gmi_text, dialect="gopher", width=DEFAULT_WIDTH, preserve_preformatted=False
):
    """Convert the input Gemtext to a Gopher map or to plain text.

    :param str gmi_text: The input Gemtext.
    :param dialect: The output dialect: ``"gopher"``, ``"plaintext"`` or a
                    :class:`Dialect` instance.
    :param int width: The wrap width of text lines.
    :param bool preserve_preformatted: Emit the content of preformatted blocks
                                       verbatim.

    :rtype: str
    :return: The converted document.

    >>> convert("# Hello\\n=> /about.gmi About")
    'iHello\\ni=====\\n0About\\t/about.txt\\n'
    >>> convert("# Hello\\n=> /about.gmi About", dialect="plaintext")
    'Hello\\n=====\\nAbout: /about.gmi\\n'
    """
    converter = GemtextConverter(
        dialect=dialect,
        width=width,
        preserve_preformatted=preserve_preformatted,
    )
    return converter.convert(gmi_text)


def _positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid int value: '%s'" % value)
    if number < 1:
        raise argparse.ArgumentTypeError("the width must be a positive integer")
    return number


def main(args=sys.argv[1:]):
    parser = argparse.ArgumentParser(
        prog="gmi2gopher",
        description="Converts Gemtext (Gemini markup) to a Gopher map or plain text",
    )

    parser.add_argument(
        "input_gmi",
        help="the Gemtext file to convert",
        type=argparse.FileType("r", encoding="UTF-8"),
    )
    parser.add_argument(
        "output",
        help="the output file (default: standard output)",
        nargs="?",
        type=argparse.FileType("w", encoding="UTF-8"),
        default=sys.stdout,
    )
    parser.add_argument(
        "-p",
        "--plain-text",
        help="output plain text instead of a Gopher map",
        action="store_true",
        default=False,
    )
    parser.add_argument(
        "-w",
        "--width",
        help="wrap text lines at the given width (default: %(default)s)",
        type=_positive_int,
        default=DEFAULT_WIDTH,
    )
    parser.add_argument(
        "--preserve-preformatted",
        help="output the content of preformatted blocks verbatim",
        action="store_true",
        default=False,
    )

    params = parser.parse_args(args)
    input_gmi = params.input_gmi.read()

    output = convert(
        input_gmi,
        dialect=PLAIN_TEXT if params.plain_text else GOPHER,
        width=params.width,
        preserve_preformatted=params.preserve_preformatted,
    )
    params.output.write(output)
    params.output.flush()


if __name__ == "__main__":
    main()

"""Tomcat users file credential records."""

import logging
from xml.etree.ElementTree import Element, ParseError

from defusedxml import ElementTree
from defusedxml.common import DefusedXmlException

from host_records.config import Config
from host_records.models import CredentialPair, ErrorKind, Result
from host_records.util.fs import read_file

logger = logging.getLogger(__name__)

ROOT_ELEMENT = "tomcat-users"
USER_ELEMENT = "user"


def _local_name(element: Element) -> str:
    # "{http://tomcat.apache.org/xml}user" -> "user"
    return element.tag.rsplit("}", 1)[-1]


def extract_credentials(xml_content: str | bytes) -> Result:
    """
    Parse tomcat-users.xml content into username/password pairs.

    The root element must be ``tomcat-users``; a default namespace on it is
    ignored. Every ``user`` child must carry both ``username`` and
    ``password`` attributes. Other children are ignored.

    Extraction is all or nothing: on failure no pairs are returned.

    Args:
        xml_content: Document text or raw bytes

    Returns:
        Successful Result with a tuple of CredentialPair in document order,
        or PARSE_ERROR

    Example:
        >>> extract_credentials('<tomcat-users><user username="a" password="b"/></tomcat-users>').value
        (CredentialPair(username='a', password='b'),)
    """
    try:
        root = ElementTree.fromstring(xml_content)
    except (ParseError, DefusedXmlException, ValueError) as e:
        logger.debug("Tomcat users XML rejected: %s", e)
        return Result.failure(ErrorKind.PARSE_ERROR, f"Could not parse XML: {e}")

    if _local_name(root) != ROOT_ELEMENT:
        logger.error("Expected <%s> root element, found <%s>", ROOT_ELEMENT, root.tag)
        return Result.failure(
            ErrorKind.PARSE_ERROR,
            f"No such node ({ROOT_ELEMENT}); root element is <{root.tag}>"
        )

    credentials = []
    users = [
        element for element in root
        if isinstance(element.tag, str) and _local_name(element) == USER_ELEMENT
    ]
    for index, element in enumerate(users):
        missing = [attr for attr in ("username", "password") if attr not in element.attrib]
        if missing:
            logger.error("An error occurred parsing the tomcat users xml: user #%d lacks %s",
                         index, ", ".join(missing))
            return Result.failure(
                ErrorKind.PARSE_ERROR,
                f"<{USER_ELEMENT}> #{index} is missing attribute(s): {', '.join(missing)}"
            )

        credentials.append(CredentialPair(
            username=element.attrib["username"],
            password=element.attrib["password"]
        ))

    return Result.success(tuple(credentials))


def extract_credentials_from_path(path: str) -> Result:
    """Read a tomcat-users.xml file and extract its credential pairs."""
    content = read_file(path)
    if not content:
        return content
    return extract_credentials(content.value)


def scan_tomcat_users(
    paths: list[str] | None = None,
    config: Config | None = None
) -> list[tuple[str, tuple[CredentialPair, ...]]]:
    """
    Extract credentials from several tomcat-users.xml files.

    Args:
        paths: Files to read; defaults to ``config.tomcat_users_files``
        config: Configuration used when ``paths`` is not given

    Returns:
        (path, pairs) for every file that was read successfully. Missing
        files are skipped quietly, other failures are logged.
    """
    if paths is None:
        paths = (config or Config()).tomcat_users_files

    found = []
    for path in paths:
        result = extract_credentials_from_path(path)
        if result:
            found.append((path, result.value))
        elif result.error == ErrorKind.NOT_FOUND:
            logger.debug("No tomcat users file at %s", path)
        else:
            logger.warning("Skipping %s: %s", path, result)

    return found

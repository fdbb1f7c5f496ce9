__version__ = "0.1"

from .builder import DEFAULT_PORTS, UNDEFINED_PORT, UriBuilder
from .errors import UriSyntaxError
from .parse import Uri, parse_relative_ref, parse_uri, parse_uri_reference
from .query import QueryParameter

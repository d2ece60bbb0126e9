"""Domain objects for probesync - explicit re-exports to satisfy linters."""
from .http_response import HttpResponse as HttpResponse
from .location import ConfigLocation as ConfigLocation
from .location import LocationKind as LocationKind
from .probe import ConfigurationDocument as ConfigurationDocument
from .probe import Probe as Probe
from .probe import ProbeRequest as ProbeRequest

__all__ = ["HttpResponse", "ConfigLocation", "LocationKind", "ConfigurationDocument", "Probe", "ProbeRequest"]

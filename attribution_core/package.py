"""
AttributionPackage: immutable description of the outbound lookup,
plus the just-in-time request parameters and the sent_at timestamp.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .constants import ATTRIBUTION_PATH, CLIENT_SDK


class ActivityKind(Enum):
    SESSION = "session"
    EVENT = "event"
    CLICK = "click"
    ATTRIBUTION = "attribution"


@dataclass(frozen=True)
class AttributionPackage:
    path: str = ATTRIBUTION_PATH
    parameters: Tuple[Tuple[str, str], ...] = ()
    client_sdk: str = CLIENT_SDK
    activity_kind: ActivityKind = ActivityKind.ATTRIBUTION

    @classmethod
    def create(cls, parameters, path=ATTRIBUTION_PATH, client_sdk=CLIENT_SDK,
               activity_kind=ActivityKind.ATTRIBUTION):
        """Build a package from a mapping or an iterable of pairs, dropping None values."""
        items = parameters.items() if hasattr(parameters, "items") else parameters
        pairs = tuple((str(k), str(v)) for k, v in items if v is not None)
        return cls(path=path, parameters=pairs, client_sdk=client_sdk,
                   activity_kind=activity_kind)

    def extended_string(self) -> str:
        lines = [
            "Path:      %s" % self.path,
            "ClientSdk: %s" % self.client_sdk,
            "Parameters:",
        ]
        for name, value in sorted(self.parameters):
            lines.append("\t%-16s %s" % (name, value))
        return "\n".join(lines)


def format_sent_at(now: Optional[datetime] = None) -> str:
    """
    Local time with milliseconds, a literal 'Z', then the UTC offset:
    2014-11-07T10:15:30.123Z+0100
    """
    if now is None:
        now = datetime.now().astimezone()
    elif now.tzinfo is None:
        now = now.astimezone()
    millis = now.microsecond // 1000
    return "%s.%03dZ%s" % (now.strftime("%Y-%m-%dT%H:%M:%S"), millis, now.strftime("%z"))


def build_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def build_params(package: AttributionPackage, now: Optional[datetime] = None):
    """Package parameters in order, with sent_at appended last."""
    params = list(package.parameters)
    params.append(("sent_at", format_sent_at(now)))
    return params

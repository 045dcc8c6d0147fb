"""
Response data carried back from the server, the attribution payload,
and the classifier that decides between "ask again later" and a final answer.
"""

from dataclasses import dataclass, fields
from typing import Optional

from .constants import ASK_IN_ABSENT
from .package import ActivityKind


@dataclass(frozen=True)
class Attribution:
    tracker_token: Optional[str] = None
    tracker_name: Optional[str] = None
    network: Optional[str] = None
    campaign: Optional[str] = None
    adgroup: Optional[str] = None
    creative: Optional[str] = None
    click_label: Optional[str] = None
    adid: Optional[str] = None

    @classmethod
    def from_json(cls, data):
        """Returns None unless `data` is a JSON object. Null fields stay None."""
        if not isinstance(data, dict):
            return None
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            values[f.name] = None if value is None else str(value)
        return cls(**values)

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class ResponseData:
    """
    One server response, tagged by the activity kind of the request that
    produced it. `attribution` is filled in by check_attribution().
    """
    activity_kind: ActivityKind
    json_response: Optional[dict] = None
    attribution: Optional[Attribution] = None
    message: Optional[str] = None
    status_code: Optional[int] = None
    url: Optional[str] = None

    @property
    def is_session(self) -> bool:
        return self.activity_kind is ActivityKind.SESSION

    @property
    def is_attribution(self) -> bool:
        return self.activity_kind is ActivityKind.ATTRIBUTION


def read_ask_in(json_response) -> int:
    value = json_response.get("ask_in", ASK_IN_ABSENT)
    if value is None or isinstance(value, bool):
        return ASK_IN_ABSENT
    try:
        return int(value)
    except (TypeError, ValueError):
        return ASK_IN_ABSENT


def check_attribution(response_data: ResponseData) -> Optional[int]:
    """
    Classify a response.

    Returns the server's ask_in delay (ms) when it wants to be asked again;
    the attribution slot is left untouched in that case. Otherwise fills
    `response_data.attribution` (possibly None) and returns None. A
    response without a parsed body is left as is.
    """
    if response_data.json_response is None:
        return None

    ask_in = read_ask_in(response_data.json_response)
    if ask_in >= 0:
        return ask_in

    response_data.attribution = Attribution.from_json(
        response_data.json_response.get("attribution")
    )
    return None

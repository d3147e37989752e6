import json
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr, StrictInt, StrictStr, ValidationError, confloat

from errors import MalformedMessage
from signaling_events import REQUIRED_FIELDS

# NaN would never match itself as a room key
WireId = Union[StrictStr, StrictInt, confloat(strict=True, allow_inf_nan=False)]


class SignalingMessage(BaseModel):
    """Inbound signaling frame. Unknown fields (sdp, candidate, ...) are kept as extras."""

    model_config = ConfigDict(extra="allow")

    cmd: str
    # ids keep their JSON type; strict so true is never read as room 1
    uid: Optional[WireId] = None
    roomId: Optional[WireId] = None
    remoteUid: Optional[WireId] = None

    _raw: str = PrivateAttr(default="")

    @property
    def raw(self) -> str:
        """The text frame exactly as it was received."""
        return self._raw

    def require(self, *fields: str):
        missing = [name for name in fields if getattr(self, name) is None]
        if missing:
            raise MalformedMessage(f"{self.cmd} is missing required field(s): {', '.join(missing)}")


def parse_message(raw: Union[str, bytes]) -> SignalingMessage:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedMessage(f"payload is not valid utf-8: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedMessage(f"payload is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMessage(f"expected a JSON object, got {type(data).__name__}")

    try:
        message = SignalingMessage.model_validate(data)
    except ValidationError as e:
        raise MalformedMessage(f"invalid signaling message: {e.errors()}") from e

    message._raw = raw
    message.require(*REQUIRED_FIELDS.get(message.cmd, ()))
    return message

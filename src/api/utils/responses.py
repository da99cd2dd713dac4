"""orjson-backed JSON response, the default response class of the app."""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _encode_model(obj: object) -> object:
    """orjson fallback for Pydantic models, dumped under their wire aliases."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    msg = f"Type is not JSON serializable: {type(obj).__name__}"
    raise TypeError(msg)


class ORJSONResponse(JSONResponse):
    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401
        return orjson.dumps(content, default=_encode_model, option=orjson.OPT_SORT_KEYS)

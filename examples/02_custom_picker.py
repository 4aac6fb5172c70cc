"""
Custom picker example.

Demonstrates:
- Registering a setter for a type the coercion table does not know
- Registering the XML body decoder
- Fixed-width kinds and form values
- Reading the debug trace from request.state
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from fastapi_request_binding import (
    FromForm,
    FromHeader,
    Picker,
    UInt8,
    XMLDecoder,
    pick_dependency,
)


class Color(IntEnum):
    BLACK = 0
    RED = 1
    YELLOW = 2


def parse_color(raw: str) -> Color:
    try:
        return Color[raw.upper()]
    except KeyError:
        raise ValueError(f"unknown color: {raw}") from None


picker = (
    Picker.default()
    .register("application/xml", XMLDecoder)
    .use_setter(Color, parse_color)
)

app = FastAPI(title="Custom Picker Example")


@dataclass
class Paint:
    name: str = ""
    color: Annotated[Color, FromHeader("color")] = Color.BLACK
    coats: Annotated[UInt8, FromForm("coats")] = 1


@app.post("/paint")
async def paint(
    request: Request,
    job: Paint = Depends(pick_dependency(Paint, picker=picker, debug=True)),
):
    """Bind from JSON, XML or form bodies and report the trace."""
    trace = request.state.pick_trace
    return {
        "name": job.name,
        "color": job.color.name,
        "coats": job.coats,
        "trace": [(e.field_name, e.outcome) for e in trace.entries],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -X POST -H "Content-Type: application/xml" -H "Color: red" \
    #   -d '<paint><name>door</name></paint>' http://localhost:8000/paint
    # curl -X POST -H "Color: yellow" -d 'coats=3' http://localhost:8000/paint
    # curl -X POST -d 'coats=300' http://localhost:8000/paint   # 400

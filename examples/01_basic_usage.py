"""
Basic usage example of fastapi-request-binding.

Demonstrates:
- Declaring sources with Annotated markers
- Decoding a JSON body and reading path, query and header values
- A companion setter for a private field
- Using pick_dependency as a FastAPI dependency
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, FastAPI

from fastapi_request_binding import (
    FromHeader,
    FromPath,
    FromQuery,
    Maximum,
    MaxLength,
    Minimum,
    pick_dependency,
)

app = FastAPI(title="Basic Binding Example")


@dataclass
class PersonCreate:
    id: Annotated[str, FromPath("id")] = ""
    name: Annotated[str, MaxLength(40)] = ""
    group: Annotated[str, FromQuery("group")] = ""
    copy: Annotated[int, FromQuery("copies"), Minimum(0), Maximum(100)] = 0
    flag: Annotated[bool, FromQuery("flag")] = False

    # private field, bound only through set_token
    _token: Annotated[str, FromHeader("authorization")] = ""

    def set_token(self, value: str) -> None:
        self._token = value.removeprefix("Bearer ")


@app.post("/person/{id}")
async def create_person(person: PersonCreate = Depends(pick_dependency(PersonCreate))):
    """Echo the bound person."""
    return {
        "id": person.id,
        "name": person.name,
        "group": person.group,
        "copy": person.copy,
        "flag": person.flag,
        "authenticated": bool(person._token),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -X POST -H "Content-Type: application/json" \
    #   -H "Authorization: Bearer ...token..." \
    #   -d '{"name": "John Doe"}' \
    #   "http://localhost:8000/person/123?group=aliens&copies=10&flag=true"
    # curl -X POST "http://localhost:8000/person/123?copies=200"   # 400

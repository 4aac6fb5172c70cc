"""Tests for the path/query/header/form value readers."""

from __future__ import annotations

from typing import Any

from fastapi_request_binding.readers import (
    VALUE_READERS,
    SourceKind,
    read_form,
    read_header,
    read_path,
    read_query,
    read_value,
)

_FORM = "application/x-www-form-urlencoded"


class TestSourceKind:
    def test_member_values(self) -> None:
        assert [k.value for k in SourceKind] == ["path", "query", "header", "form"]

    def test_every_kind_has_a_reader(self) -> None:
        assert set(VALUE_READERS) == set(SourceKind)


class TestReadPath:
    async def test_present(self, make_request: Any) -> None:
        request = make_request(path_params={"id": "123"})
        assert await read_path(request, "id") == "123"

    async def test_converted_values_are_stringified(self, make_request: Any) -> None:
        request = make_request(path_params={"id": 7})
        assert await read_path(request, "id") == "7"

    async def test_absent(self, make_request: Any) -> None:
        assert await read_path(make_request(), "id") == ""


class TestReadQuery:
    async def test_first_value_wins(self, make_request: Any) -> None:
        request = make_request(query_string="group=aliens&group=humans")
        assert await read_query(request, "group") == "aliens"

    async def test_absent(self, make_request: Any) -> None:
        assert await read_query(make_request(), "group") == ""


class TestReadHeader:
    async def test_case_insensitive(self, make_request: Any) -> None:
        request = make_request(headers={"Color": "yellow"})
        assert await read_header(request, "color") == "yellow"
        assert await read_header(request, "COLOR") == "yellow"

    async def test_absent(self, make_request: Any) -> None:
        assert await read_header(make_request(), "color") == ""


class TestReadForm:
    async def test_reads_urlencoded_body(self, make_request: Any) -> None:
        request = make_request(
            method="POST",
            headers={"content-type": _FORM},
            body=b"name=John+Doe",
        )
        assert await read_form(request, "name") == "John Doe"

    async def test_body_takes_precedence_over_query(self, make_request: Any) -> None:
        request = make_request(
            method="PUT",
            headers={"content-type": _FORM},
            query_string="name=query",
            body=b"name=body",
        )
        assert await read_form(request, "name") == "body"

    async def test_falls_back_to_query(self, make_request: Any) -> None:
        request = make_request(
            method="POST",
            headers={"content-type": _FORM},
            query_string="name=query",
            body=b"other=1",
        )
        assert await read_form(request, "name") == "query"

    async def test_get_reads_query_only(self, make_request: Any) -> None:
        request = make_request(
            method="GET",
            headers={"content-type": _FORM},
            query_string="name=query",
            body=b"name=body",
        )
        assert await read_form(request, "name") == "query"

    async def test_non_form_content_type_yields_nothing(
        self, make_request: Any
    ) -> None:
        request = make_request(
            method="POST",
            headers={"content-type": "application/json"},
            body=b'{"name": "John"}',
        )
        assert await read_form(request, "name") == ""

    async def test_reads_after_body_was_consumed(self, make_request: Any) -> None:
        request = make_request(
            method="POST",
            headers={"content-type": _FORM},
            body=b"name=John",
        )
        assert await request.body() == b"name=John"
        assert await read_form(request, "name") == "John"


class TestReadValue:
    async def test_dispatches_by_kind(self, make_request: Any) -> None:
        request = make_request(headers={"flag": "true"}, query_string="flag=false")
        assert await read_value(request, SourceKind.HEADER, "flag") == "true"
        assert await read_value(request, SourceKind.QUERY, "flag") == "false"

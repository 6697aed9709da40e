from postman2openapi.document import RequestBody
from postman2openapi.generator.body import apply_request_body, language_content_type, response_content
from postman2openapi.generator.variables import Variables
from postman2openapi.parser.base import Body, Header


def _body(data: dict) -> Body:
    return Body.model_validate(data)


class TestRawBody:
    def test_json_object(self):
        rb = apply_request_body(None, _body({"mode": "raw", "raw": '{"a": 1}'}), "Create", Variables())
        media = rb.content["application/json"]
        assert media.schema_.schema_type == "object"
        assert media.schema_.properties["a"].schema_type == "number"
        assert media.examples["Create"].value == {"a": 1}

    def test_variables_resolved_before_parsing(self):
        body = _body({"mode": "raw", "raw": '{"id": {{id}}}'})
        rb = apply_request_body(None, body, "r", Variables({"id": "5"}))
        assert rb.content["application/json"].examples["r"].value == {"id": 5}

    def test_language_hint(self):
        body = _body({"mode": "raw", "raw": "<a/>", "options": {"raw": {"language": "xml"}}})
        rb = apply_request_body(None, body, "r", Variables())
        assert rb.content["application/xml"].examples["r"].value == "<a/>"

    def test_declared_content_type_fallback(self):
        rb = apply_request_body(None, _body({"mode": "raw", "raw": "a=b"}), "r", Variables(), "text/csv")
        assert list(rb.content) == ["text/csv"]

    def test_plain_text_default(self):
        rb = apply_request_body(None, _body({"mode": "raw", "raw": "hello"}), "r", Variables())
        assert list(rb.content) == ["text/plain"]

    def test_json_scalar_is_text(self):
        rb = apply_request_body(None, _body({"mode": "raw", "raw": "42"}), "r", Variables())
        assert rb.content["text/plain"].examples["r"].value == "42"

    def test_examples_accumulate_and_schemas_merge(self):
        rb = apply_request_body(None, _body({"mode": "raw", "raw": '{"a": 1}'}), "first", Variables())
        rb = apply_request_body(rb, _body({"mode": "raw", "raw": '{"b": "x"}'}), "second", Variables())
        media = rb.content["application/json"]
        assert set(media.examples) == {"first", "second"}
        assert set(media.schema_.properties) == {"a", "b"}


class TestFormBodies:
    def test_urlencoded(self):
        body = _body({"mode": "urlencoded", "urlencoded": [{"key": "a", "value": "1"}, {"key": "b"}]})
        rb = apply_request_body(None, body, "r", Variables())
        media = rb.content["application/x-www-form-urlencoded"]
        assert set(media.schema_.properties) == {"a"}
        assert media.examples["r"].value == {"a": "1"}

    def test_formdata(self):
        body = _body({"mode": "formdata", "formdata": [
            {"key": "photo", "type": "file", "src": "/tmp/x.png", "description": "Photo"},
            {"key": "caption", "value": "Rex", "type": "text"},
            {"key": "note", "type": "text"},
        ]})
        rb = apply_request_body(None, body, "r", Variables())
        props = rb.content["multipart/form-data"].schema_.properties
        assert props["photo"].format == "binary"
        assert props["photo"].description == "Photo"
        assert props["caption"].example == "Rex"
        assert props["note"].schema_type == "string"
        assert rb.content["multipart/form-data"].examples["r"].value == {"caption": "Rex"}

    def test_repeated_formdata_collects_examples(self):
        first = _body({"mode": "formdata", "formdata": [{"key": "caption", "value": "Rex", "type": "text"}]})
        second = _body({"mode": "formdata", "formdata": [{"key": "caption", "value": "Tom", "type": "text"}]})
        rb = apply_request_body(None, first, "one", Variables())
        rb = apply_request_body(rb, second, "two", Variables())
        examples = rb.content["multipart/form-data"].examples
        assert {k: e.value for k, e in examples.items()} == {"one": {"caption": "Rex"}, "two": {"caption": "Tom"}}


class TestOtherModes:
    def test_graphql(self):
        body = _body({"mode": "graphql", "graphql": {"query": "{ pets { id } }", "variables": '{"n": 2}'}})
        rb = apply_request_body(None, body, "Search", Variables())
        media = rb.content["application/json"]
        assert set(media.schema_.properties) == {"query", "variables"}
        assert media.examples["Search"].value == {"query": "{ pets { id } }", "variables": {"n": 2}}

    def test_graphql_merges_with_raw_json(self):
        rb = apply_request_body(None, _body({"mode": "raw", "raw": '{"id": 1}'}), "raw", Variables())
        graphql = _body({"mode": "graphql", "graphql": {"query": "{ a }"}})
        rb = apply_request_body(rb, graphql, "gql", Variables())
        media = rb.content["application/json"]
        assert set(media.schema_.properties) == {"id", "query", "variables"}
        assert set(media.examples) == {"raw", "gql"}

    def test_graphql_bad_variables(self):
        body = _body({"mode": "graphql", "graphql": {"query": "{ a }", "variables": "{oops"}})
        rb = apply_request_body(None, body, "q", Variables())
        assert rb.content["application/json"].examples["q"].value == {"query": "{ a }"}

    def test_file(self):
        rb = apply_request_body(None, _body({"mode": "file", "file": {"src": "a.bin"}}), "r", Variables())
        assert rb.content["application/octet-stream"].schema_.format == "binary"

    def test_no_mode(self):
        rb = apply_request_body(RequestBody(), _body({}), "r", Variables())
        assert list(rb.content) == ["application/octet-stream"]
        assert rb.content["application/octet-stream"].schema_ is None


class TestLanguageContentType:
    def test_mapping(self):
        assert language_content_type("xml") == "application/xml"
        assert language_content_type("json") == "application/json"
        assert language_content_type("html") == "text/html"
        assert language_content_type("javascript") == "text/plain"
        assert language_content_type(None) is None


class TestResponseContent:
    def test_json(self):
        content = response_content('[{"a": 1}]', [], "ok", Variables())
        assert content["application/json"].schema_.schema_type == "array"
        assert content["application/json"].examples["ok"].value == [{"a": 1}]

    def test_declared_type_for_text(self):
        content = response_content("<p/>", [Header(key="Content-Type", value="text/html; charset=utf-8")], "ok", Variables())
        assert list(content) == ["text/html"]

    def test_empty(self):
        assert response_content(None, [], "ok", Variables()) == {}
        assert response_content("", [], "ok", Variables()) == {}

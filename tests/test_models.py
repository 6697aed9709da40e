from postman2openapi.parser.base import Auth, Body, Collection, Item, Request, Response, Url


class TestUrl:
    def test_from_raw_full_url(self):
        url = Url.from_raw("https://api.example.com:8443/users/:id?page=1&flag")
        assert url.protocol == "https"
        assert url.host == ["api", "example", "com"]
        assert url.port == "8443"
        assert url.path == ["users", ":id"]
        assert [(q.key, q.value) for q in url.query] == [("page", "1"), ("flag", None)]

    def test_from_raw_with_variable_host(self):
        url = Url.from_raw("{{baseUrl}}/pets")
        assert url.protocol is None
        assert url.host == ["{{baseUrl}}"]
        assert url.path == ["pets"]

    def test_from_raw_without_path(self):
        url = Url.from_raw("https://example.com")
        assert url.path is None

    def test_path_objects_are_flattened(self):
        url = Url.model_validate({"path": ["a", {"type": "string", "value": "b"}, {"type": "any"}]})
        assert url.path == ["a", "b", ""]

    def test_host_string_becomes_list(self):
        url = Url.model_validate({"host": "api.example.com"})
        assert url.host == ["api.example.com"]


class TestRequest:
    def test_string_url_is_parsed(self):
        req = Request.model_validate({"url": "https://x.io/a"})
        assert req.method == "GET"
        assert req.url.host == ["x", "io"]

    def test_header_block_string(self):
        req = Request.model_validate({"header": "X-A: 1\nX-B: two"})
        assert [(h.key, h.value) for h in req.header] == [("X-A", "1"), ("X-B", "two")]

    def test_description_object(self):
        req = Request.model_validate({"description": {"content": "Docs", "type": "text/plain"}})
        assert req.description == "Docs"

    def test_null_method_defaults_to_get(self):
        assert Request.model_validate({"method": None}).method == "GET"


class TestBody:
    def test_unknown_mode_is_dropped(self):
        assert Body.model_validate({"mode": "binary-blob"}).mode is None

    def test_language_hint(self):
        body = Body.model_validate({"mode": "raw", "raw": "<a/>", "options": {"raw": {"language": "xml"}}})
        assert body.language == "xml"

    def test_graphql_variables_object_is_serialized(self):
        body = Body.model_validate({"mode": "graphql", "graphql": {"query": "{ a }", "variables": {"x": 1}}})
        assert body.graphql.variables == '{"x": 1}'


class TestAuth:
    def test_v21_attribute_list(self):
        auth = Auth.model_validate({"type": "bearer", "bearer": [{"key": "token", "value": "t"}]})
        assert auth.auth_type == "bearer"
        assert auth.attribute("token") == "t"

    def test_v20_attribute_mapping(self):
        auth = Auth.model_validate({"type": "basic", "basic": {"username": "u", "password": "p"}})
        assert auth.attributes() == {"username": "u", "password": "p"}

    def test_missing_attributes(self):
        auth = Auth.model_validate({"type": "oauth2"})
        assert auth.attributes() == {}
        assert auth.attribute("scope") is None


class TestItem:
    def test_folder_and_request(self):
        folder = Item.model_validate({"name": "F", "item": [{"name": "R", "request": "https://x.io"}]})
        assert folder.is_folder is True
        assert folder.item[0].is_folder is False
        assert folder.item[0].request.url.host == ["x", "io"]

    def test_empty_folder_is_still_a_folder(self):
        assert Item.model_validate({"name": "F", "item": []}).is_folder is True

    def test_response_original_request(self):
        resp = Response.model_validate({"name": "ok", "code": 200, "originalRequest": {"method": "POST"}})
        assert resp.original_request.method == "POST"


class TestCollection:
    def test_null_lists(self):
        c = Collection.model_validate({"info": {"name": "C"}, "item": None, "variable": None})
        assert c.item == []
        assert c.variable == []

    def test_numeric_query_value_is_text(self):
        url = Url.model_validate({"query": [{"key": "page", "value": 2}]})
        assert url.query[0].value == "2"

from typegen.shared.errors import (
    ConfigError,
    DocumentError,
    GenerationError,
    TypeMismatchError,
    UnresolvedReferenceError,
    UnsupportedConstructError,
)


class TestGenerationError:
    def test_init_no_location(self):
        error = GenerationError("test message")
        assert str(error) == "test message"
        assert error.location is None

    def test_init_with_location(self):
        error = GenerationError("test message", "components.schemas.Foo")
        assert str(error) == "[components.schemas.Foo] test message"
        assert error.location == "components.schemas.Foo"

    def test_location_filled_in_later(self):
        error = GenerationError("test message")
        error.location = "GET /users"
        assert str(error) == "[GET /users] test message"


class TestUnresolvedReferenceError:
    def test_init(self):
        error = UnresolvedReferenceError("Missing")
        assert str(error) == "Unresolved reference 'Missing'"
        assert error.reference == "Missing"
        assert isinstance(error, GenerationError)

    def test_init_with_location(self):
        error = UnresolvedReferenceError("Missing", "components.schemas.Foo")
        assert str(error) == "[components.schemas.Foo] Unresolved reference 'Missing'"


class TestUnsupportedConstructError:
    def test_init(self):
        error = UnsupportedConstructError("anyOf")
        assert str(error) == "Unsupported construct: anyOf"
        assert error.construct == "anyOf"

    def test_init_with_location(self):
        error = UnsupportedConstructError("header parameter 'x'", "GET /users")
        assert str(error) == "[GET /users] Unsupported construct: header parameter 'x'"


class TestTypeMismatchError:
    def test_init(self):
        error = TypeMismatchError("string", "Number()", "GET /health")
        assert str(error) == "[GET /health] Expected string, got Number()"
        assert error.expected == "string"
        assert error.actual == "Number()"


class TestOtherErrors:
    def test_document_error(self):
        error = DocumentError("Document root must be a mapping", "spec.yaml")
        assert str(error) == "[spec.yaml] Document root must be a mapping"
        assert isinstance(error, GenerationError)

    def test_config_error(self):
        error = ConfigError("Path is outside the API prefix '/api'", "/other")
        assert str(error) == "[/other] Path is outside the API prefix '/api'"

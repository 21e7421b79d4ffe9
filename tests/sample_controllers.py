"""
Controllers shared by the test suite (also importable by the CLI tests as
``sample_controllers:<Name>``).
"""

from restmap import Pagination, RestController, collection_action, resource_action


class WidgetsController(RestController):
    """Widgets kept in memory."""

    def setup(self):
        self.calls = []
        self.register_input_schema("fetch", {
            "type": "object",
            "properties": {
                "id": {"type": "number", "description": "Widget id", "minimum": 1},
            },
            "required": ["id"],
        })
        self.register_input_schema("find", Pagination(size=50))
        self.custom_collection_handler("search", "GET")

    def fetch(self, params):
        """Fetch one widget."""
        self.calls.append(("fetch", params))
        return {"id": params["id"], "name": f"widget-{params['id']}"}

    def find(self, params):
        self.calls.append(("find", params))
        return params

    def index(self, params):
        return ("alpha", "beta")

    def create(self, params):
        self.calls.append(("create", params))
        return {"created": params}

    def search(self, params):
        return [params.get("q")]

    def helper(self, value, other=None):
        return (value, other)

    def broken(self, params):
        return object()


class GreetingController(RestController):

    def find(self, params):
        return "hello"


class ReportsController(RestController):
    """Reports built on demand."""

    @resource_action(
        "GET",
        input_schema={"id": {"type": "integer", "min": 1, "required": True}},
        summary="Fetch one report",
    )
    def fetch(self, params):
        return {"id": params["id"]}

    @collection_action("post", name="export", output_schema={"type": "object"})
    def run_export(self, params):
        return {"exported": True, "format": params.get("format", "csv")}

    def render_html(self, params):
        return "<html></html>"


class SyncController(RestController):
    resource_mapping = {"fetch": "GET", "sync": "PUT"}
    collection_mapping = {"sync": "POST", "find": "GET"}

    def sync(self, params):
        return "synced"

    def find(self, params):
        return []

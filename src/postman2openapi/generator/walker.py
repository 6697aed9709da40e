"""Depth-first collection walker.

Folders push their tag and auth onto the traversal state for exactly the
span of their subtree; requests are handed to the assembler with the
nearest enclosing auth.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from postman2openapi.document import OpenApiDocument
from postman2openapi.generator.assembler import Assembler
from postman2openapi.parser.base import Auth, Collection, Item

logger = logging.getLogger(__name__)

DEFAULT_FOLDER_NAME = "<folder>"
DEFAULT_REQUEST_NAME = "<request>"


@dataclass
class TraversalState:
    """Tag hierarchy and inherited auth of the folder currently being walked."""

    hierarchy: list[str] = field(default_factory=list)
    auth_stack: list[Auth] = field(default_factory=list)

    @contextmanager
    def scope(self, tag: str, auth: Auth | None = None) -> Iterator[None]:
        self.hierarchy.append(tag)
        if auth is not None:
            self.auth_stack.append(auth)
        try:
            yield
        finally:
            if auth is not None:
                self.auth_stack.pop()
            self.hierarchy.pop()

    def inherited_auth(self) -> Auth | None:
        return self.auth_stack[-1] if self.auth_stack else None


class Walker:
    """Walks a collection tree into an assembler."""

    def __init__(self, assembler: Assembler):
        self.assembler = assembler
        self.state = TraversalState()

    def walk(self, collection: Collection) -> OpenApiDocument:
        if collection.auth is not None:
            self.assembler.add_root_security(collection.auth)
        self.walk_items(collection.item)
        return self.assembler.document

    def walk_items(self, items: list[Item]) -> None:
        for item in items:
            if item.is_folder:
                self.walk_folder(item)
            else:
                self.walk_request(item)

    def walk_folder(self, folder: Item) -> None:
        tag = self.assembler.add_tag(folder.name or DEFAULT_FOLDER_NAME, folder.description)
        with self.state.scope(tag, folder.auth):
            self.walk_items(folder.item or [])

    def walk_request(self, item: Item) -> None:
        name = item.name or DEFAULT_REQUEST_NAME
        request = item.request
        if request is None or request.url is None:
            logger.debug("Skipping %r: no request URL", name)
            return

        url = request.url
        self.assembler.add_server(url)
        auth = request.auth if request.auth is not None else self.state.inherited_auth()
        self.assembler.add_operation(
            item=item,
            request=request,
            url=url,
            name=name,
            tags=list(self.state.hierarchy),
            auth=auth,
        )

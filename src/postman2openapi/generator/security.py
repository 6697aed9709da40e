"""Security scheme builder.

Maps a Postman auth helper to a named OpenAPI security scheme, registering
the scheme on the document the first time its type is seen.
"""

import logging
from typing import NamedTuple

from postman2openapi.document import Components, OAuthFlow, OAuthFlows, OpenApiDocument, SecurityScheme
from postman2openapi.generator.variables import Variables
from postman2openapi.parser.base import Auth

logger = logging.getLogger(__name__)

# auth type -> (scheme name, http scheme, bearer format)
HTTP_SCHEMES = {
    "basic": ("basicAuth", "basic", None),
    "digest": ("digestAuth", "digest", None),
    "bearer": ("bearerAuth", "bearer", None),
    "jwt": ("jwtBearerAuth", "bearer", "jwt"),
}

API_KEY_SCHEME = "apiKey"
OAUTH2_SCHEME = "oauth2"


class Requirement(NamedTuple):
    """A security requirement; `name=None` means "no authentication"."""

    name: str | None
    scopes: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, list[str]]:
        if self.name is None:
            return {}
        return {self.name: list(self.scopes)}


NO_REQUIREMENT = Requirement(None)


class SecurityBuilder:
    """Builds requirements from auth helpers and registers their schemes."""

    def __init__(self, document: OpenApiDocument, variables: Variables):
        self.document = document
        self.variables = variables

    def build(self, auth: Auth) -> Requirement | None:
        """Return the requirement for `auth`, or None when it has no OpenAPI form."""
        kind = auth.auth_type.lower()
        if kind == "noauth":
            return NO_REQUIREMENT
        if kind in HTTP_SCHEMES:
            name, scheme, bearer_format = HTTP_SCHEMES[kind]
            self._register(name, SecurityScheme(scheme_type="http", scheme=scheme, bearer_format=bearer_format))
            return Requirement(name)
        if kind == "apikey":
            self._register(API_KEY_SCHEME, self._api_key_scheme(auth))
            return Requirement(API_KEY_SCHEME)
        if kind == "oauth2":
            scopes = self._scopes(auth)
            self._register(OAUTH2_SCHEME, self._oauth2_scheme(auth, scopes))
            return Requirement(OAUTH2_SCHEME, tuple(scopes))

        logger.debug("Auth type %r has no OpenAPI security scheme; skipped", auth.auth_type)
        return None

    def _register(self, name: str, scheme: SecurityScheme) -> None:
        if self.document.components is None:
            self.document.components = Components()
        self.document.components.security_schemes.setdefault(name, scheme)

    def _api_key_scheme(self, auth: Auth) -> SecurityScheme:
        key = auth.attribute("key") or "Authorization"
        location = "query" if auth.attribute("in") == "query" else "header"
        return SecurityScheme(
            scheme_type="apiKey",
            name=self.variables.resolve(key),
            location=location,
        )

    def _scopes(self, auth: Auth) -> list[str]:
        scope = auth.attribute("scope") or ""
        return [self.variables.resolve(s) for s in scope.split(" ") if s]

    def _oauth2_scheme(self, auth: Auth, scopes: list[str]) -> SecurityScheme:
        authorization_url = self.variables.resolve(auth.attribute("authUrl") or "")
        token_url = self.variables.resolve(auth.attribute("accessTokenUrl") or "")
        refresh = auth.attribute("refreshTokenUrl")
        refresh_url = self.variables.resolve(refresh) if refresh else None
        scope_map = {s: s for s in scopes}

        grant_type = auth.attribute("grantType") or "authorization_code"
        flows = OAuthFlows()
        if grant_type == "client_credentials":
            flows.client_credentials = OAuthFlow(token_url=token_url, refresh_url=refresh_url, scopes=scope_map)
        elif grant_type == "password_credentials":
            flows.password = OAuthFlow(token_url=token_url, refresh_url=refresh_url, scopes=scope_map)
        elif grant_type == "implicit":
            flows.implicit = OAuthFlow(
                authorization_url=authorization_url, refresh_url=refresh_url, scopes=scope_map
            )
        else:
            # authorization_code, authorization_code_with_pkce, and unknown grants
            flows.authorization_code = OAuthFlow(
                authorization_url=authorization_url,
                token_url=token_url,
                refresh_url=refresh_url,
                scopes=scope_map,
            )
        return SecurityScheme(scheme_type="oauth2", flows=flows)

"""
Auth gate for HTML pages.

Every route of a router declared with `route_class=AuthGatedRoute` is gated:
while the session is loading a waiting page is shown, signed-out visitors
get the sign-in page, and only an authenticated session reaches the handler.
"""
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi.routing import APIRoute

from kharcha.modules.auth.session import Authenticated, Loading, SessionState, Unauthenticated
from kharcha.web.templating import templates

LOADING_TEMPLATE = "pages/loading.html"
SIGN_IN_TEMPLATE = "pages/sign_in.html"


def render_loading(request: Request) -> Response:
    return templates.TemplateResponse(request, LOADING_TEMPLATE, {})


def render_sign_in(request: Request, message: str = "", busy: bool = False, email: str = "") -> Response:
    return templates.TemplateResponse(
        request, SIGN_IN_TEMPLATE, {"message": message, "busy": busy, "email": email}
    )


async def render_gate(
    request: Request,
    state: SessionState,
    children: Callable[[], Awaitable[Response]],
) -> Response:
    """Render exactly one of: waiting page, sign-in page, or the protected children"""
    if isinstance(state, Authenticated):
        return await children()
    if isinstance(state, Unauthenticated):
        return render_sign_in(request)
    if isinstance(state, Loading):
        return render_loading(request)
    raise TypeError(f"Unknown session state {state!r}")


class AuthGatedRoute(APIRoute):
    """APIRoute that resolves the session and passes the request through the auth gate"""

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        handler = super().get_route_handler()

        async def gated_handler(request: Request) -> Response:
            provider = request.app.state.session_provider
            state = provider.resolve(request)
            request.state.session = state
            response = await render_gate(request, state, lambda: handler(request))

            # Expired or tampered cookie: drop it along with the sign-in page
            from_cookie = provider.cookie_name in request.cookies and "authorization" not in request.headers
            if isinstance(state, Unauthenticated) and state.reason and from_cookie:
                provider.clear_session_cookie(response)
            return response

        return gated_handler

from __future__ import annotations

from fastapi.routing import APIRoute
from starlette.requests import Request

from portal.request_context import current_endpoint, endpoint_label


class EndpointLabelRoute(APIRoute):
    """Tags everything a handler does (slow SQL included) with its endpoint."""

    def get_route_handler(self):
        original_handler = super().get_route_handler()

        async def labelled_handler(request: Request):
            token = current_endpoint.set(endpoint_label(request.method, self.path))
            try:
                return await original_handler(request)
            finally:
                current_endpoint.reset(token)

        return labelled_handler
